from __future__ import annotations

import asyncio

import pytest

from inbox_insights.app.run import analyze_inbox, fetch_inbox, inbox_query, search_inbox
from inbox_insights.gmail.client import GmailAuthError
from inbox_insights.pipeline.orchestrator import FallbackChain


def test_inbox_query() -> None:
    assert inbox_query() == "in:inbox"
    assert inbox_query("  ") == "in:inbox"
    assert inbox_query("invoice") == "in:inbox invoice"


def test_fetch_inbox_skips_broken_messages(gmail_message, fake_gmail) -> None:
    client = fake_gmail(
        [gmail_message("m1", subject="Kept", body="Body", unread=True)],
        failures={"gone": KeyError("gone"), "bad": ValueError("bad payload")},
    )
    events: list[str] = []

    emails, summary = fetch_inbox(
        client,
        max_results=10,
        account_email="me@example.org",
        progress_cb=lambda step, payload: events.append(step),
    )

    assert [e.subject for e in emails] == ["Kept"]
    assert emails[0].is_unread
    assert emails[0].account_email == "me@example.org"
    assert (summary.fetched, summary.loaded, summary.skipped_deleted, summary.errors) == (3, 1, 1, 1)
    assert events == ["fetch_messages", "error", "loaded"]
    assert client.queries == [("in:inbox", 10)]


def test_fetch_inbox_aborts_on_auth_failure(gmail_message, fake_gmail) -> None:
    client = fake_gmail(
        [gmail_message("m1")],
        failures={"m2": GmailAuthError("invalid_grant")},
    )
    with pytest.raises(GmailAuthError):
        fetch_inbox(client, max_results=10)


def test_analyze_inbox_returns_newest_first(gmail_message, fake_gmail) -> None:
    client = fake_gmail(
        [
            gmail_message("older", subject="Invoice due", date="Tue, 19 Nov 2024 09:00:00 +0000"),
            gmail_message("newer", subject="Interview tomorrow", date="Wed, 20 Nov 2024 09:00:00 +0000"),
        ]
    )

    summaries = asyncio.run(analyze_inbox(client, FallbackChain([]), max_results=5))

    assert [s.email.message_id for s in summaries] == ["newer", "older"]
    assert summaries[0].analysis is not None
    assert summaries[0].importance == "high"


def test_search_inbox_uses_quick_summaries(gmail_message, fake_gmail) -> None:
    client = fake_gmail([gmail_message("m1", subject="Payment", body="Invoice attached")])

    summaries = search_inbox(client, "invoice", max_results=20)

    assert client.queries == [("in:inbox invoice", 20)]
    assert summaries[0].analysis is None
    assert "finance" in summaries[0].tags
