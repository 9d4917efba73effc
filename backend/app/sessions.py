from __future__ import annotations

from typing import Any, Dict, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

SESSION_MAX_AGE_S = 7 * 24 * 60 * 60


class InvalidSession(Exception):
    pass


class SessionSigner:
    """Signed, time-limited bearer tokens carrying the signed-in user's profile."""

    def __init__(self, secret_key: str, max_age_s: int = SESSION_MAX_AGE_S):
        self._serializer = URLSafeTimedSerializer(secret_key, salt="inbox-insights-session")
        self._max_age_s = max_age_s

    def issue(self, *, email: str, name: str = "", picture: Optional[str] = None) -> str:
        return self._serializer.dumps({"email": email, "name": name, "picture": picture})

    def verify(self, token: str) -> Dict[str, Any]:
        try:
            data = self._serializer.loads(token, max_age=self._max_age_s)
        except SignatureExpired as exc:
            raise InvalidSession("Session expired") from exc
        except BadSignature as exc:
            raise InvalidSession("Invalid token") from exc
        if not isinstance(data, dict) or not data.get("email"):
            raise InvalidSession("Invalid token")
        return data
