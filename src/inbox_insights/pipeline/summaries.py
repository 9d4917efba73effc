from __future__ import annotations

from typing import List

from inbox_insights.models import EmailAnalysis, EmailSummary, NormalizedEmail, dedupe, importance_from_urgency
from inbox_insights.rules.classification import ClassificationResult, classify_email

# Action item keyword -> tag shown in the dashboard.
ACTION_TAGS = (
    ("respond", "needs response"),
    ("review", "needs review"),
    ("schedule", "scheduling"),
)

HEADLINE_CUES = (
    (("deadline", "urgent"), "Time-sensitive matter requiring immediate attention"),
    (("payment", "invoice"), "Financial/payment related"),
    (("interview", "job"), "Career opportunity"),
    (("project", "client"), "Project/client work"),
)


def _classify(email: NormalizedEmail) -> ClassificationResult:
    return classify_email(
        subject=email.subject,
        text=email.snippet,
        sender_email=email.sender_email,
    )


def _base_tags(email: NormalizedEmail, result: ClassificationResult) -> List[str]:
    tags = list(result.tags)
    text = f"{email.subject} {email.snippet}".lower()
    if "bank" in email.sender_domain or "payment" in text or "invoice" in text:
        tags.append("finance")
    return tags


def build_summary(email: NormalizedEmail, analysis: EmailAnalysis) -> EmailSummary:
    """Attach an analysis to an email and derive importance and tags from it."""
    tags = _base_tags(email, _classify(email))

    if analysis.category != "other":
        tags.append(analysis.category.replace("_", " "))
    for item in analysis.action_items:
        lowered = item.lower()
        tags.extend(tag for keyword, tag in ACTION_TAGS if keyword in lowered)

    return EmailSummary(
        email=email,
        importance=importance_from_urgency(analysis.urgency_level),
        tags=dedupe(tags),
        summary=analysis.summary,
        analysis=analysis,
    )


def headline_summary(snippet: str) -> str:
    snippet = snippet or ""
    lowered = snippet.lower()
    points = [text for cues, text in HEADLINE_CUES if any(c in lowered for c in cues)]
    if points:
        return f"{', '.join(points)}. {snippet[:150]}..."
    return f"{snippet[:150]}..." if len(snippet) > 150 else snippet


def quick_summary(email: NormalizedEmail) -> EmailSummary:
    """
    Analysis-free summary for search results.
    Importance comes straight from the keyword classifier.
    """
    result = _classify(email)
    return EmailSummary(
        email=email,
        importance=result.importance,  # type: ignore[arg-type]
        tags=dedupe(_base_tags(email, result)),
        summary=headline_summary(email.snippet),
    )
