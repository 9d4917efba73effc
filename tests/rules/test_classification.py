from __future__ import annotations

import pytest

from inbox_insights.rules.BaseRule import KeywordRule
from inbox_insights.rules.classification import (
    IMPORTANT_DOMAINS,
    IMPORTANT_KEYWORDS,
    classify_email,
    resolve_category,
)
from inbox_insights.rules.core import MailText


@pytest.mark.parametrize("keyword", IMPORTANT_KEYWORDS)
def test_keyword_in_subject_makes_email_important(keyword: str) -> None:
    result = classify_email(subject=f"Re: {keyword.upper()} notes", text="", sender_email="a@example.org")
    assert result.importance == "high"
    assert keyword in result.tags


@pytest.mark.parametrize("domain", IMPORTANT_DOMAINS)
def test_important_domain_wins_regardless_of_text(domain: str) -> None:
    result = classify_email(subject="hello there", text="nothing to see", sender_email=f"someone@{domain}")
    assert result.importance == "high"


def test_notification_words_give_medium_importance() -> None:
    assert classify_email(subject="Weekly update", text="", sender_email="a@example.org").importance == "medium"
    assert classify_email(subject="Hi", text="A friendly reminder", sender_email="a@example.org").importance == "medium"


def test_plain_email_is_low_importance() -> None:
    result = classify_email(subject="Lunch plans", text="See you at noon", sender_email="friend@example.org")
    assert result.importance == "low"
    assert result.category == "other"
    assert result.tags == ()


def test_missing_at_sign_degrades_to_empty_domain() -> None:
    result = classify_email(subject="Lunch plans", text="", sender_email="not-an-address")
    assert result.importance == "low"
    assert result.tags == ()


def test_urgent_project_mail_from_unknown_domain() -> None:
    result = classify_email(
        subject="Urgent: Project deadline moved up",
        text="The deadline has moved to Wednesday, please adjust your tasks.",
        sender_email="john@techcorp.com",
    )
    assert result.importance == "high"
    assert result.category == "other"
    assert {"urgent", "project", "deadline"} <= set(result.tags)


def test_linkedin_sender_is_a_job_opportunity() -> None:
    result = classify_email(
        subject="Senior Frontend Developer position at Meta",
        text="",
        sender_email="jobs@linkedin.com",
    )
    assert result.category == "job_opportunity"
    assert "career" in result.tags
    assert result.importance == "high"


def test_freelance_domain_precedes_payment_keywords() -> None:
    result = classify_email(
        subject="Payment received",
        text="Your invoice was paid in full.",
        sender_email="support@freelancer.com",
    )
    assert result.category == "client_work"
    assert "freelance" in result.tags


def test_job_keyword_precedes_payment_keyword() -> None:
    result = classify_email(subject="Job offer", text="Invoice terms attached", sender_email="hr@acme.io")
    assert result.category == "job_opportunity"


def test_payment_and_meeting_categories() -> None:
    assert classify_email(subject="Invoice #42", text="", sender_email="billing@acme.io").category == "payment"
    assert classify_email(subject="Zoom tomorrow", text="", sender_email="pm@acme.io").category == "meeting"


def test_domain_tags_are_deduplicated() -> None:
    result = classify_email(subject="hi", text="", sender_email="bot@upwork.fiverr.com")
    assert result.tags.count("freelance") == 1
    github = classify_email(subject="PR merged", text="", sender_email="noreply@github.com")
    assert github.tags == ("development",)


def test_classification_is_deterministic() -> None:
    kwargs = dict(subject="Contract proposal", text="milestone 2", sender_email="x@toptal.com")
    assert classify_email(**kwargs) == classify_email(**kwargs)


def test_resolve_category_reports_matching_rule() -> None:
    mail = MailText(subject="Invoice", text="", sender_email="pay@upwork.com")
    category, reason = resolve_category(mail)
    assert category == "client_work"
    assert reason == "freelance_platform: sender domain contains 'upwork'"


def test_resolve_category_with_custom_rules() -> None:
    class NewsletterRule(KeywordRule):
        name = "newsletter"
        category = "marketing"
        priority = 10
        keywords = ("unsubscribe",)

    mail = MailText(subject="Weekly digest", text="Click to unsubscribe", sender_email="news@shop.io")

    assert resolve_category(mail, [NewsletterRule()]) == ("marketing", "newsletter: text mentions 'unsubscribe'")
    assert resolve_category(mail) == ("other", None)
