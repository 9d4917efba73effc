from __future__ import annotations

from typing import Iterable, List

from inbox_insights.models import EmailSummary


def important_only(summaries: Iterable[EmailSummary]) -> List[EmailSummary]:
    return [s for s in summaries if s.importance == "high"]


def unread_count(summaries: Iterable[EmailSummary]) -> int:
    return sum(1 for s in summaries if s.email.is_unread)


def matches_query(summary: EmailSummary, query: str) -> bool:
    q = (query or "").lower()
    return (
        q in summary.email.subject.lower()
        or q in summary.email.sender_name.lower()
        or q in summary.summary.lower()
        or any(q in tag.lower() for tag in summary.tags)
    )


def search_summaries(summaries: Iterable[EmailSummary], query: str) -> List[EmailSummary]:
    """Case-insensitive substring search over subject, sender, summary and tags."""
    return [s for s in summaries if matches_query(s, query)]
