from __future__ import annotations

from inbox_insights.extractors.deadline import extract_deadline
from inbox_insights.extractors.summary import estimate_read_time, summarize
from inbox_insights.extractors.todos import extract_action_items
from inbox_insights.extractors.urgency import detect_urgency
from inbox_insights.models import EmailAnalysis
from inbox_insights.rules.classification import resolve_category
from inbox_insights.rules.core import MailText
from inbox_insights.rules.playbook import suggested_response_for, tips_for
from inbox_insights.strategies.base import AnalysisRequest, AnalysisStrategy


def analyze_with_rules(
    subject: str, body: str, sender_email: str, sender_name: str
) -> EmailAnalysis:
    """
    Deterministic keyword analysis of one email.
    Never raises; empty strings produce the default analysis.
    """
    subject = subject or ""
    body = body or ""
    mail = MailText(subject=subject, text=body, sender_email=sender_email or "")
    text = mail.haystack

    category, _reason = resolve_category(mail)

    return EmailAnalysis(
        summary=summarize(body, sender_name or "", subject),
        action_items=extract_action_items(text),
        urgency_level=detect_urgency(text),  # type: ignore[arg-type]
        category=category,  # type: ignore[arg-type]
        tips=tips_for(category),
        # No sentiment heuristic at this layer.
        sentiment="neutral",
        estimated_read_time=estimate_read_time(body),
        suggested_response=suggested_response_for(category),
        deadline=extract_deadline(text),
    )


class RuleBasedStrategy(AnalysisStrategy):
    name = "rules"

    async def analyze(self, request: AnalysisRequest) -> EmailAnalysis:
        return self.analyze_sync(request)

    def analyze_sync(self, request: AnalysisRequest) -> EmailAnalysis:
        return analyze_with_rules(
            request.subject,
            request.body,
            request.sender_email,
            request.sender_name,
        )
