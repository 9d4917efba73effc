from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple


Importance = Literal["high", "medium", "low"]
Urgency = Literal["critical", "high", "medium", "low"]
Category = Literal[
    "client_work",
    "job_opportunity",
    "payment",
    "meeting",
    "marketing",
    "personal",
    "other",
]
Sentiment = Literal["positive", "neutral", "negative"]

URGENCY_LEVELS: Tuple[str, ...] = ("critical", "high", "medium", "low")
CATEGORIES: Tuple[str, ...] = (
    "client_work",
    "job_opportunity",
    "payment",
    "meeting",
    "marketing",
    "personal",
    "other",
)
SENTIMENTS: Tuple[str, ...] = ("positive", "neutral", "negative")

# Urgency is finer grained than importance; critical and high collapse together.
_IMPORTANCE_BY_URGENCY: Dict[str, str] = {
    "critical": "high",
    "high": "high",
    "medium": "medium",
    "low": "low",
}


def importance_from_urgency(urgency: str) -> Importance:
    return _IMPORTANCE_BY_URGENCY.get(urgency, "low")  # type: ignore[return-value]


def dedupe(items) -> Tuple[str, ...]:
    """Drop duplicates while keeping first-seen order."""
    seen: Dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return tuple(seen)


@dataclass(frozen=True)
class NormalizedEmail:
    message_id: str
    subject: str
    body_text: str
    snippet: str
    sender_email: str
    sender_name: str
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_unread: bool = False
    account_email: str = ""
    label_ids: List[str] = field(default_factory=list)

    @property
    def sender_domain(self) -> str:
        # "jobs@linkedin.com" -> "linkedin.com"; no "@" -> "".
        _, sep, domain = (self.sender_email or "").partition("@")
        return domain.lower() if sep else ""


@dataclass(frozen=True)
class EmailAnalysis:
    summary: str
    action_items: List[str]
    urgency_level: Urgency
    category: Category
    tips: List[str]
    sentiment: Sentiment
    estimated_read_time: str
    suggested_response: Optional[str] = None
    deadline: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "summary": self.summary,
            "actionItems": list(self.action_items),
            "urgencyLevel": self.urgency_level,
            "category": self.category,
            "tips": list(self.tips),
            "sentiment": self.sentiment,
            "estimatedReadTime": self.estimated_read_time,
        }
        # Optional fields are omitted rather than sent as null.
        if self.suggested_response is not None:
            data["suggestedResponse"] = self.suggested_response
        if self.deadline is not None:
            data["deadline"] = self.deadline
        return data


@dataclass(frozen=True)
class EmailSummary:
    email: NormalizedEmail
    importance: Importance
    tags: Tuple[str, ...]
    summary: str
    analysis: Optional[EmailAnalysis] = None

    @property
    def original_email_url(self) -> str:
        return f"https://mail.google.com/mail/u/0/#inbox/{self.email.message_id}"

    def to_dict(self) -> Dict[str, Any]:
        email = self.email
        data: Dict[str, Any] = {
            "id": email.message_id,
            "sender": email.sender_name,
            "senderEmail": email.sender_email,
            "subject": email.subject,
            "summary": self.summary,
            "originalEmailUrl": self.original_email_url,
            "importance": self.importance,
            "tags": list(self.tags),
            "receivedAt": email.received_at.isoformat(),
            "isUnread": email.is_unread,
            "accountEmail": email.account_email,
        }
        if self.analysis is not None:
            analysis = self.analysis.to_dict()
            # The summary already sits at the top level.
            analysis.pop("summary", None)
            data["aiAnalysis"] = analysis
        return data


@dataclass(frozen=True)
class InsightsStats:
    total_emails: int = 0
    urgent_emails: int = 0
    client_emails: int = 0
    job_opportunities: int = 0
    # Not computed from data yet.
    response_rate: str = "85%"
    average_response_time: str = "4.2 hours"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalEmails": self.total_emails,
            "urgentEmails": self.urgent_emails,
            "clientEmails": self.client_emails,
            "jobOpportunities": self.job_opportunities,
            "responseRate": self.response_rate,
            "averageResponseTime": self.average_response_time,
        }


@dataclass(frozen=True)
class InsightsReport:
    insights: List[str]
    recommendations: List[str]
    stats: InsightsStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
            "stats": self.stats.to_dict(),
        }
