from __future__ import annotations
import json
from dataclasses import dataclass, asdict
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Protocol


@dataclass
class StoredTokens:
    access_token: str
    email: str
    name: str = ""
    refresh_token: Optional[str] = None


class TokenStore(Protocol):
    """Credential store keyed by account email."""

    def get(self, key: str) -> Optional[StoredTokens]: ...
    def set(self, key: str, value: StoredTokens) -> None: ...
    def delete(self, key: str) -> None: ...


def _from_dict(data: dict) -> Optional[StoredTokens]:
    # Keep load resilient to partial/extra fields.
    access_token = data.get("access_token")
    email = data.get("email")
    if not access_token or not email:
        return None
    return StoredTokens(
        access_token=str(access_token),
        email=str(email),
        name=str(data.get("name") or ""),
        refresh_token=data.get("refresh_token") or None,
    )


class InMemoryTokenStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._tokens: Dict[str, StoredTokens] = {}

    def get(self, key: str) -> Optional[StoredTokens]:
        with self._lock:
            return self._tokens.get(key)

    def set(self, key: str, value: StoredTokens) -> None:
        with self._lock:
            self._tokens[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._tokens.pop(key, None)


class JsonFileTokenStore:
    """Whole-file JSON store; each write rewrites the file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = Lock()

    def _load(self) -> Dict[str, dict]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[StoredTokens]:
        with self._lock:
            entry = self._load().get(key)
        return _from_dict(entry) if isinstance(entry, dict) else None

    def set(self, key: str, value: StoredTokens) -> None:
        with self._lock:
            data = self._load()
            data[key] = asdict(value)
            self._save(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._save(data)
