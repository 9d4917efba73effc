from __future__ import annotations

import asyncio
from typing import Iterable, List

from inbox_insights.models import EmailSummary, NormalizedEmail
from inbox_insights.pipeline.orchestrator import FallbackChain
from inbox_insights.pipeline.summaries import build_summary


def newest_first(summaries: Iterable[EmailSummary]) -> List[EmailSummary]:
    return sorted(summaries, key=lambda s: s.email.received_at, reverse=True)


async def summarize_email(email: NormalizedEmail, chain: FallbackChain) -> EmailSummary:
    analysis = await chain.analyze_email(email)
    return build_summary(email, analysis)


async def analyze_batch(emails: Iterable[NormalizedEmail], chain: FallbackChain) -> List[EmailSummary]:
    """
    Analyze every email concurrently, then order newest first.

    All or nothing: if the surrounding task is cancelled, pending analyses are
    cancelled with it and no partial list is returned.
    """
    summaries = await asyncio.gather(*(summarize_email(email, chain) for email in emails))
    return newest_first(summaries)
