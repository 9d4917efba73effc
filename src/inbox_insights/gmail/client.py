from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from inbox_insights.storage.tokens import StoredTokens


SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "openid",
]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class GmailAuthError(RuntimeError):
    """Stored Gmail authorization is expired, revoked or rejected."""


def is_auth_failure(exc: BaseException) -> bool:
    text = str(exc).lower()
    return "invalid_grant" in text or "unauthorized" in text


@dataclass(frozen=True)
class GmailClientConfig:
    # OAuth web client from Google Cloud Console.
    client_id: Optional[str]
    client_secret: Optional[str]
    # Gmail userId, "me" refers to the authenticated user.
    user_id: str = "me"


class GmailClient:
    def __init__(self, cfg: GmailClientConfig, tokens: StoredTokens):
        self._cfg = cfg
        self._tokens = tokens
        self._creds: Optional[Credentials] = None
        self._service = None

    def connect(self) -> None:
        """Create an authenticated Gmail API service client from stored tokens."""
        creds = Credentials(
            token=self._tokens.access_token,
            refresh_token=self._tokens.refresh_token,
            token_uri=TOKEN_URI,
            client_id=self._cfg.client_id,
            client_secret=self._cfg.client_secret,
            scopes=SCOPES,
        )
        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except RefreshError as exc:
                raise GmailAuthError(str(exc)) from exc

        self._creds = creds
        self._service = build("gmail", "v1", credentials=creds, cache_discovery=False)

    @property
    def service(self):
        if self._service is None:
            raise RuntimeError("GmailClient is not connected. Call connect() first.")
        return self._service

    def _execute(self, request) -> Dict[str, Any]:
        try:
            return request.execute()
        except RefreshError as exc:
            raise GmailAuthError(str(exc)) from exc
        except HttpError as exc:
            if exc.resp is not None and exc.resp.status == 401:
                raise GmailAuthError(str(exc)) from exc
            raise

    def list_messages(self, query: str = "in:inbox", max_results: int = 50) -> List[str]:
        """
        List message IDs matching a Gmail search query.
        Example query: 'in:inbox invoice'
        """
        resp = self._execute(
            self.service.users()
            .messages()
            .list(userId=self._cfg.user_id, q=query, maxResults=max_results)
        )
        msgs = resp.get("messages", []) or []
        return [m["id"] for m in msgs]

    def get_message(self, message_id: str, fmt: str = "full") -> Dict[str, Any]:
        """
        Fetch a full message resource.
        fmt: 'full' | 'metadata' | 'minimal' | 'raw'
        """
        return self._execute(
            self.service.users()
            .messages()
            .get(userId=self._cfg.user_id, id=message_id, format=fmt)
        )
