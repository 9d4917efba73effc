from __future__ import annotations

import asyncio

import pytest

from inbox_insights.rules.playbook import DEFAULT_TIPS, TIPS_BY_CATEGORY
from inbox_insights.strategies.base import AnalysisRequest
from inbox_insights.strategies.rules import RuleBasedStrategy, analyze_with_rules


def test_urgent_project_mail_is_critical_and_uncategorized() -> None:
    analysis = analyze_with_rules(
        "Urgent: Project deadline moved up",
        "The deadline has moved to Wednesday, please adjust your tasks.",
        "john@techcorp.com",
        "John Smith",
    )
    assert analysis.urgency_level == "critical"
    assert analysis.category == "other"
    assert analysis.tips == DEFAULT_TIPS
    assert analysis.suggested_response is None
    assert analysis.sentiment == "neutral"


def test_client_work_mail_gets_client_tips_and_template() -> None:
    analysis = analyze_with_rules(
        "New proposal",
        "Please review the attached brief and reply by friday 12.",
        "sarah@upwork.com",
        "Sarah Wilson",
    )
    assert analysis.category == "client_work"
    assert analysis.tips == TIPS_BY_CATEGORY["client_work"]
    assert analysis.suggested_response is not None
    assert analysis.suggested_response.startswith("Thank you for your email.")
    assert analysis.action_items == [
        "Respond to this email",
        "Review the attached documents or links",
    ]
    assert analysis.deadline == "friday 12"


def test_payment_mail_has_no_suggested_response() -> None:
    analysis = analyze_with_rules("Invoice due", "Payment of $200 is due: march 5", "billing@acme.io", "Acme")
    assert analysis.category == "payment"
    assert analysis.suggested_response is None
    assert analysis.deadline == "march 5"
    assert analysis.tips == TIPS_BY_CATEGORY["payment"]


@pytest.mark.parametrize(
    "subject, body, sender",
    [
        ("", "", ""),
        ("Zoom call", "", "pm@acme.io"),
        ("job", "respond review schedule payment", "x@linkedin.com"),
        ("weird", "éè \U0001f600" * 50, "no-at-sign"),
    ],
)
def test_rule_analysis_is_total_and_bounded(subject: str, body: str, sender: str) -> None:
    analysis = analyze_with_rules(subject, body, sender, "Someone")
    assert len(analysis.action_items) <= 3
    assert len(analysis.tips) == 3
    assert analysis.estimated_read_time.endswith(" min read")


def test_rule_analysis_is_idempotent() -> None:
    args = ("Meeting tomorrow", "Can we schedule a call? " * 20, "pm@acme.io", "PM")
    assert analyze_with_rules(*args) == analyze_with_rules(*args)


def test_empty_body_summary_mentions_sender() -> None:
    analysis = analyze_with_rules("Catch up", "", "ann@example.org", "Ann")
    assert analysis.summary == "Email from Ann regarding: Catch up"
    assert analysis.estimated_read_time == "0 min read"


def test_rule_strategy_is_async_wrapper() -> None:
    request = AnalysisRequest(subject="Zoom call", body="", sender_email="pm@acme.io", sender_name="PM")
    result = asyncio.run(RuleBasedStrategy().analyze(request))
    assert result.category == "meeting"
    assert result == analyze_with_rules("Zoom call", "", "pm@acme.io", "PM")
