# backend/app/api/auth.py
from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from backend.app.deps import (
    CurrentUser,
    get_current_user,
    get_session_signer,
    get_settings,
    get_token_store,
)
from backend.app.sessions import InvalidSession, SessionSigner
from backend.app.status import sync_status_store
from inbox_insights.config.settings import Settings
from inbox_insights.gmail.oauth import authorization_url, exchange_code
from inbox_insights.storage.tokens import TokenStore

logger = logging.getLogger(__name__)

router = APIRouter()


class VerifyRequest(BaseModel):
    token: str | None = None


@router.get("/auth/google")
def google_auth(settings: Settings = Depends(get_settings)) -> dict:
    try:
        return {"authUrl": authorization_url(settings)}
    except Exception as exc:
        logger.error("failed to build Google auth URL: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to generate auth URL") from exc


@router.get("/auth/google/callback")
async def google_callback(
    code: str | None = None,
    settings: Settings = Depends(get_settings),
    store: TokenStore = Depends(get_token_store),
    signer: SessionSigner = Depends(get_session_signer),
) -> RedirectResponse:
    if not code:
        raise HTTPException(status_code=400, detail="Authorization code is required")

    try:
        # Token exchange and profile lookup are blocking HTTP calls.
        tokens, profile = await run_in_threadpool(exchange_code, settings, code)
    except Exception as exc:
        logger.error("OAuth callback failed: %s: %s", type(exc).__name__, exc)
        raise HTTPException(status_code=500, detail="Authentication failed") from exc

    if not tokens.email:
        raise HTTPException(status_code=500, detail="Authentication failed")

    store.set(tokens.email, tokens)
    session = signer.issue(email=tokens.email, name=tokens.name, picture=profile.get("picture"))
    return RedirectResponse(url=f"/?{urlencode({'token': session, 'email': tokens.email})}")


@router.post("/auth/verify")
def verify_token(payload: VerifyRequest, signer: SessionSigner = Depends(get_session_signer)) -> dict:
    if not payload.token:
        raise HTTPException(status_code=401, detail="Token is required")
    try:
        user = signer.verify(payload.token)
    except InvalidSession as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    return {"user": user}


@router.post("/auth/logout")
def logout(
    user: CurrentUser = Depends(get_current_user),
    store: TokenStore = Depends(get_token_store),
) -> dict:
    # Only the signed-in account can be disconnected.
    store.delete(user.email)
    sync_status_store.clear(user.email)
    return {"message": "Logged out successfully"}
