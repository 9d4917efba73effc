from __future__ import annotations

from typing import Any, Dict, Optional

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from inbox_insights.config.settings import Settings
from inbox_insights.gmail.client import SCOPES, TOKEN_URI
from inbox_insights.storage.tokens import StoredTokens


def build_flow(settings: Settings, *, state: Optional[str] = None) -> Flow:
    if not settings.google_client_id or not settings.google_client_secret:
        raise RuntimeError("Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET to enable Gmail sign-in.")

    client_config = {
        "web": {
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": TOKEN_URI,
            "redirect_uris": [settings.google_redirect_uri],
        }
    }
    flow = Flow.from_client_config(client_config, scopes=SCOPES, state=state)
    flow.redirect_uri = settings.google_redirect_uri
    return flow


def authorization_url(settings: Settings) -> str:
    flow = build_flow(settings)
    auth_url, _state = flow.authorization_url(
        access_type="offline",
        include_granted_scopes="true",
        prompt="consent",
    )
    return auth_url


def fetch_user_profile(creds: Credentials) -> Dict[str, Any]:
    oauth2 = build("oauth2", "v2", credentials=creds, cache_discovery=False)
    return oauth2.userinfo().get().execute()


def exchange_code(settings: Settings, code: str) -> tuple[StoredTokens, Dict[str, Any]]:
    """Swap an authorization code for tokens and look up who signed in."""
    flow = build_flow(settings)
    flow.fetch_token(code=code)
    creds = flow.credentials
    profile = fetch_user_profile(creds)

    tokens = StoredTokens(
        access_token=creds.token,
        refresh_token=creds.refresh_token,
        email=profile.get("email", ""),
        name=profile.get("name", ""),
    )
    return tokens, profile
