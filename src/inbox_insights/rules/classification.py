from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from inbox_insights.models import dedupe
from inbox_insights.rules.builtins import default_category_rules
from inbox_insights.rules.core import MailText
from inbox_insights.rules.BaseRule import BaseRule


IMPORTANT_KEYWORDS: Tuple[str, ...] = (
    "urgent",
    "interview",
    "client",
    "job offer",
    "project",
    "deadline",
    "payment",
    "invoice",
    "contract",
    "meeting",
    "important",
    "asap",
    "proposal",
    "milestone",
    "freelance",
    "upwork",
    "freelancer",
)

IMPORTANT_DOMAINS: Tuple[str, ...] = (
    "upwork.com",
    "freelancer.com",
    "linkedin.com",
    "indeed.com",
    "glassdoor.com",
    "angel.co",
    "stackoverflow.com",
    "fiverr.com",
    "guru.com",
    "99designs.com",
    "toptal.com",
    "peopleperhour.com",
)

MEDIUM_KEYWORDS: Tuple[str, ...] = ("notification", "update", "reminder")

# (domain fragment, tag)
DOMAIN_TAGS: Tuple[Tuple[str, str], ...] = (
    ("linkedin", "career"),
    ("github", "development"),
    ("upwork", "freelance"),
    ("freelancer", "freelance"),
    ("fiverr", "freelance"),
)


@dataclass(frozen=True)
class ClassificationResult:
    importance: str
    tags: Tuple[str, ...]
    category: str
    reason: str | None = None


def classify_email(*, subject: str, text: str, sender_email: str) -> ClassificationResult:
    """
    Keyword and sender-domain classification.
    Total over any input: missing "@" or empty text only yields defaults.
    """
    mail = MailText(subject=subject, text=text, sender_email=sender_email)
    category, reason = resolve_category(mail)
    return ClassificationResult(
        importance=determine_importance(mail),
        tags=extract_tags(mail),
        category=category,
        reason=reason,
    )


def determine_importance(mail: MailText) -> str:
    hay = mail.haystack
    domain = mail.domain

    if any(keyword in hay for keyword in IMPORTANT_KEYWORDS):
        return "high"
    if domain and any(important in domain for important in IMPORTANT_DOMAINS):
        return "high"
    if any(keyword in hay for keyword in MEDIUM_KEYWORDS):
        return "medium"
    return "low"


def extract_tags(mail: MailText) -> Tuple[str, ...]:
    hay = mail.haystack
    domain = mail.domain

    tags: List[str] = [keyword for keyword in IMPORTANT_KEYWORDS if keyword in hay]
    if domain:
        tags.extend(tag for fragment, tag in DOMAIN_TAGS if fragment in domain)
    return dedupe(tags)


def resolve_category(
    mail: MailText, rules: Sequence[BaseRule] | None = None
) -> tuple[str, str | None]:
    # First match wins; the order is part of the observable behaviour.
    for rule in rules if rules is not None else default_category_rules():
        matched, reason = rule.match(mail)
        if matched:
            return rule.category, f"{rule.name}: {reason}"
    return "other", None
