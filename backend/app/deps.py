from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Header, HTTPException

from backend.app.sessions import InvalidSession, SessionSigner
from inbox_insights.app.run import connect_client
from inbox_insights.config.settings import Settings, load_settings
from inbox_insights.gmail.client import GmailClient
from inbox_insights.pipeline.orchestrator import FallbackChain, build_default_chain
from inbox_insights.storage.tokens import JsonFileTokenStore, StoredTokens, TokenStore

GmailFactory = Callable[[StoredTokens], GmailClient]


@dataclass(frozen=True)
class CurrentUser:
    email: str
    name: str = ""
    picture: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"email": self.email, "name": self.name, "picture": self.picture}


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def _token_store(path: str) -> JsonFileTokenStore:
    return JsonFileTokenStore(Path(path))


def get_token_store(settings: Settings = Depends(get_settings)) -> TokenStore:
    return _token_store(settings.tokens_path)


def get_session_signer(settings: Settings = Depends(get_settings)) -> SessionSigner:
    return SessionSigner(settings.session_secret)


def get_chain(settings: Settings = Depends(get_settings)) -> FallbackChain:
    return build_default_chain(settings)


def get_gmail_factory(settings: Settings = Depends(get_settings)) -> GmailFactory:
    def factory(tokens: StoredTokens) -> GmailClient:
        return connect_client(settings, tokens)

    return factory


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    signer: SessionSigner = Depends(get_session_signer),
) -> CurrentUser:
    token = ""
    if authorization:
        parts = authorization.split(" ", 1)
        token = parts[1].strip() if len(parts) == 2 else ""
    if not token:
        raise HTTPException(status_code=401, detail="Access token is required")
    try:
        data = signer.verify(token)
    except InvalidSession as exc:
        raise HTTPException(status_code=403, detail="Invalid token") from exc
    return CurrentUser(email=data["email"], name=data.get("name") or "", picture=data.get("picture"))


def get_gmail_tokens(
    user: CurrentUser = Depends(get_current_user),
    store: TokenStore = Depends(get_token_store),
) -> StoredTokens:
    tokens = store.get(user.email)
    if tokens is None:
        raise HTTPException(status_code=401, detail="Gmail not connected")
    return tokens
