from __future__ import annotations

from typing import List, Sequence

from inbox_insights.models import EmailSummary, InsightsReport, InsightsStats

URGENT_SHARE_THRESHOLD = 0.3
UNREAD_THRESHOLD = 10
CLIENT_SENDER_MARKERS = ("upwork", "freelancer")


def _is_client_email(summary: EmailSummary) -> bool:
    sender = summary.email.sender_email or ""
    return any(m in sender for m in CLIENT_SENDER_MARKERS) or "client" in summary.tags


def aggregate_insights(batch: Sequence[EmailSummary]) -> InsightsReport:
    """
    Mailbox-level insights from already analyzed emails.

    Each check is independent, so several insight/recommendation pairs can be
    emitted; both lists stay index-aligned. An empty batch yields an empty
    report with zero counts.
    """
    batch = list(batch or [])
    insights: List[str] = []
    recommendations: List[str] = []

    total_emails = len(batch)
    urgent_emails = sum(1 for s in batch if s.importance == "high")
    client_emails = sum(1 for s in batch if _is_client_email(s))
    job_opportunities = sum(1 for s in batch if "job offer" in s.tags)
    unread_emails = sum(1 for s in batch if s.email.is_unread)

    if urgent_emails > total_emails * URGENT_SHARE_THRESHOLD:
        insights.append(f"You have {urgent_emails} urgent emails - consider setting up priority filters")
        recommendations.append("Create email rules to automatically flag urgent messages")

    if client_emails > 0:
        insights.append(f"{client_emails} client-related emails detected this week")
        recommendations.append("Set up dedicated folders for each client to stay organized")

    if job_opportunities > 0:
        insights.append(f"{job_opportunities} new job opportunities found")
        recommendations.append("Respond to job opportunities within 24 hours for better chances")

    if unread_emails > UNREAD_THRESHOLD:
        insights.append(f"You have {unread_emails} unread emails")
        recommendations.append("Schedule daily email processing time to avoid overwhelm")

    return InsightsReport(
        insights=insights,
        recommendations=recommendations,
        # response_rate / average_response_time keep their placeholder defaults.
        stats=InsightsStats(
            total_emails=total_emails,
            urgent_emails=urgent_emails,
            client_emails=client_emails,
            job_opportunities=job_opportunities,
        ),
    )
