# backend/app/api/emails.py
from __future__ import annotations

import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from backend.app.deps import (
    CurrentUser,
    GmailFactory,
    get_chain,
    get_current_user,
    get_gmail_factory,
    get_gmail_tokens,
    get_settings,
)
from backend.app.status import sync_status_store
from inbox_insights.app.run import analyze_inbox, search_inbox
from inbox_insights.config.settings import Settings
from inbox_insights.gmail.client import GmailAuthError, GmailClient, is_auth_failure
from inbox_insights.models import EmailSummary
from inbox_insights.pipeline.filters import important_only, unread_count
from inbox_insights.pipeline.insights import aggregate_insights
from inbox_insights.pipeline.orchestrator import FallbackChain
from inbox_insights.storage.tokens import StoredTokens

logger = logging.getLogger(__name__)

router = APIRouter()

AUTH_EXPIRED = "Gmail authorization expired. Please sign in again."


def _emails_response(summaries: List[EmailSummary]) -> dict[str, Any]:
    return {
        "emails": [s.to_dict() for s in summaries],
        "total": len(summaries),
        "unreadCount": unread_count(summaries),
    }


def _http_error(exc: Exception, failure: str) -> HTTPException:
    if isinstance(exc, GmailAuthError) or is_auth_failure(exc):
        return HTTPException(status_code=401, detail=AUTH_EXPIRED)
    return HTTPException(status_code=500, detail=failure)


async def _connect(factory: GmailFactory, tokens: StoredTokens) -> GmailClient:
    return await run_in_threadpool(factory, tokens)


async def _analyzed(
    *,
    user: CurrentUser,
    tokens: StoredTokens,
    factory: GmailFactory,
    chain: FallbackChain,
    max_results: int,
) -> List[EmailSummary]:
    client = await _connect(factory, tokens)
    try:
        summaries = await analyze_inbox(client, chain, max_results=max_results, account_email=user.email)
    finally:
        await chain.aclose()
    sync_status_store.record(user.email, emails=len(summaries), strategies=chain.active_strategies())
    return summaries


@router.get("/emails")
async def get_emails(
    user: CurrentUser = Depends(get_current_user),
    tokens: StoredTokens = Depends(get_gmail_tokens),
    factory: GmailFactory = Depends(get_gmail_factory),
    chain: FallbackChain = Depends(get_chain),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    try:
        summaries = await _analyzed(
            user=user, tokens=tokens, factory=factory, chain=chain, max_results=settings.max_results
        )
    except Exception as exc:
        logger.error("error fetching emails: %s: %s", type(exc).__name__, exc)
        raise _http_error(exc, "Failed to fetch emails") from exc
    return _emails_response(summaries)


@router.get("/emails/important")
async def get_important_emails(
    user: CurrentUser = Depends(get_current_user),
    tokens: StoredTokens = Depends(get_gmail_tokens),
    factory: GmailFactory = Depends(get_gmail_factory),
    chain: FallbackChain = Depends(get_chain),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    try:
        summaries = await _analyzed(
            user=user, tokens=tokens, factory=factory, chain=chain, max_results=settings.max_results
        )
    except Exception as exc:
        logger.error("error fetching important emails: %s: %s", type(exc).__name__, exc)
        raise _http_error(exc, "Failed to fetch important emails") from exc
    return _emails_response(important_only(summaries))


@router.get("/emails/search")
async def search_emails(
    q: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    factory: GmailFactory = Depends(get_gmail_factory),
    settings: Settings = Depends(get_settings),
    tokens: StoredTokens = Depends(get_gmail_tokens),
) -> dict[str, Any]:
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    try:
        client = await _connect(factory, tokens)
        summaries = await run_in_threadpool(
            search_inbox,
            client,
            q,
            max_results=settings.search_max_results,
            account_email=user.email,
        )
    except Exception as exc:
        logger.error("error searching emails: %s: %s", type(exc).__name__, exc)
        raise _http_error(exc, "Failed to search emails") from exc
    return _emails_response(summaries)


@router.get("/emails/insights")
async def get_email_insights(
    user: CurrentUser = Depends(get_current_user),
    tokens: StoredTokens = Depends(get_gmail_tokens),
    factory: GmailFactory = Depends(get_gmail_factory),
    chain: FallbackChain = Depends(get_chain),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    try:
        # More emails give better insights.
        summaries = await _analyzed(
            user=user,
            tokens=tokens,
            factory=factory,
            chain=chain,
            max_results=settings.insights_max_results,
        )
    except Exception as exc:
        logger.error("error getting email insights: %s: %s", type(exc).__name__, exc)
        raise _http_error(exc, "Failed to get email insights") from exc
    return aggregate_insights(summaries).to_dict()


@router.get("/accounts")
def get_accounts(user: CurrentUser = Depends(get_current_user)) -> dict[str, Any]:
    status = sync_status_store.snapshot(user.email)
    return {
        "accounts": [
            {
                "email": user.email,
                "name": user.name,
                "isConnected": True,
                "lastSync": status["lastSync"],
                # From the last analyzed read of this account.
                "syncedEmails": status["emails"],
                "strategies": status["strategies"],
            }
        ]
    }


@router.post("/emails/sync")
def sync_emails(user: CurrentUser = Depends(get_current_user)) -> dict[str, Any]:
    # Emails are fetched live on every read; nothing to refresh yet.
    return {"success": True, "message": "Email sync completed successfully"}
