# src/inbox_insights/app/run.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from googleapiclient.errors import HttpError

from inbox_insights.config.settings import Settings
from inbox_insights.gmail.client import GmailAuthError, GmailClient, GmailClientConfig
from inbox_insights.models import EmailSummary, InsightsReport, NormalizedEmail
from inbox_insights.parsing.parser import normalize_message
from inbox_insights.pipeline.batch import analyze_batch, newest_first
from inbox_insights.pipeline.insights import aggregate_insights
from inbox_insights.pipeline.orchestrator import FallbackChain
from inbox_insights.pipeline.summaries import quick_summary
from inbox_insights.storage.tokens import StoredTokens

logger = logging.getLogger(__name__)

INBOX_QUERY = "in:inbox"


@dataclass
class FetchSummary:
    fetched: int
    loaded: int
    skipped_deleted: int
    errors: int


def load_gmail_config(settings: Settings) -> GmailClientConfig:
    return GmailClientConfig(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        user_id="me",
    )


def connect_client(settings: Settings, tokens: StoredTokens) -> GmailClient:
    client = GmailClient(load_gmail_config(settings), tokens)
    client.connect()
    return client


def inbox_query(query: Optional[str] = None) -> str:
    # Only inbox emails; a search term narrows it further.
    query = (query or "").strip()
    return f"{INBOX_QUERY} {query}" if query else INBOX_QUERY


def _is_deleted(exc: Exception) -> bool:
    # Message deleted/moved between list and fetch.
    if isinstance(exc, KeyError):
        return True
    return isinstance(exc, HttpError) and exc.resp is not None and exc.resp.status == 404


def fetch_inbox(
    client: GmailClient,
    *,
    max_results: int,
    query: Optional[str] = None,
    account_email: str = "",
    progress_cb: Optional[Callable[[str, Dict[str, Any]], None]] = None,
) -> Tuple[List[NormalizedEmail], FetchSummary]:
    """
    List inbox messages and normalize each one.

    Single-message failures are counted and skipped; an expired authorization
    aborts the whole fetch.
    """
    def report(step: str, **payload: Any) -> None:
        if progress_cb:
            progress_cb(step, payload)

    message_ids = client.list_messages(query=inbox_query(query), max_results=max_results)
    report("fetch_messages", detail=f"Found {len(message_ids)} messages")

    emails: List[NormalizedEmail] = []
    skipped_deleted = 0
    errors = 0
    for mid in message_ids:
        try:
            msg = client.get_message(mid, fmt="full")
            msg.setdefault("id", mid)
            emails.append(normalize_message(msg, account_email=account_email))
        except GmailAuthError:
            raise
        except Exception as exc:
            if _is_deleted(exc):
                skipped_deleted += 1
                logger.info("skipping message %s: %s", mid, exc)
                continue
            errors += 1
            logger.error("failed to load message %s: %s: %s", mid, type(exc).__name__, exc)
            report("error", detail=f"{type(exc).__name__}: {exc}", message_id=mid)

    summary = FetchSummary(
        fetched=len(message_ids),
        loaded=len(emails),
        skipped_deleted=skipped_deleted,
        errors=errors,
    )
    report("loaded", metrics=asdict(summary))
    return emails, summary


async def analyze_inbox(
    client: GmailClient,
    chain: FallbackChain,
    *,
    max_results: int,
    account_email: str = "",
) -> List[EmailSummary]:
    # The Gmail client is blocking; keep it off the event loop.
    emails, _summary = await asyncio.to_thread(
        fetch_inbox,
        client,
        max_results=max_results,
        account_email=account_email,
    )
    return await analyze_batch(emails, chain)


def search_inbox(
    client: GmailClient,
    query: str,
    *,
    max_results: int,
    account_email: str = "",
) -> List[EmailSummary]:
    """Gmail-side search; results get the cheap keyword summary, not a full analysis."""
    emails, _summary = fetch_inbox(
        client,
        max_results=max_results,
        query=query,
        account_email=account_email,
    )
    return newest_first(quick_summary(email) for email in emails)


async def inbox_insights(
    client: GmailClient,
    chain: FallbackChain,
    *,
    max_results: int,
    account_email: str = "",
) -> InsightsReport:
    summaries = await analyze_inbox(
        client,
        chain,
        max_results=max_results,
        account_email=account_email,
    )
    return aggregate_insights(summaries)
