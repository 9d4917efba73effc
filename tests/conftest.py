from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone

import pytest

from inbox_insights.models import NormalizedEmail

BASE_TIME = datetime(2024, 11, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_email():
    def _make(
        *,
        message_id: str = "m1",
        subject: str = "Hello",
        body: str = "",
        snippet: str | None = None,
        sender_email: str = "someone@example.org",
        sender_name: str = "Someone",
        hours_ago: float = 0,
        is_unread: bool = False,
    ) -> NormalizedEmail:
        return NormalizedEmail(
            message_id=message_id,
            subject=subject,
            body_text=body,
            snippet=body[:200] if snippet is None else snippet,
            sender_email=sender_email,
            sender_name=sender_name,
            received_at=BASE_TIME - timedelta(hours=hours_ago),
            is_unread=is_unread,
        )

    return _make


@pytest.fixture
def gmail_message():
    """Minimal Gmail `format=full` message resource."""

    def _message(
        mid: str,
        *,
        subject: str = "Hello",
        body: str = "",
        sender: str = "Someone <someone@example.org>",
        date: str = "Wed, 20 Nov 2024 10:00:00 +0000",
        unread: bool = False,
    ) -> dict:
        return {
            "id": mid,
            "snippet": body[:100],
            "labelIds": ["INBOX", "UNREAD"] if unread else ["INBOX"],
            "payload": {
                "mimeType": "text/plain",
                "headers": [
                    {"name": "Subject", "value": subject},
                    {"name": "From", "value": sender},
                    {"name": "Date", "value": date},
                ],
                "body": {"data": base64.urlsafe_b64encode(body.encode("utf-8")).decode("ascii")},
            },
        }

    return _message


class FakeGmailClient:
    def __init__(self, messages: list[dict], failures: dict[str, Exception] | None = None):
        self.messages = {m["id"]: m for m in messages}
        self.failures = failures or {}
        self.queries: list[tuple[str, int]] = []

    def list_messages(self, query: str = "in:inbox", max_results: int = 50) -> list[str]:
        self.queries.append((query, max_results))
        return (list(self.messages) + list(self.failures))[:max_results]

    def get_message(self, message_id: str, fmt: str = "full") -> dict:
        if message_id in self.failures:
            raise self.failures[message_id]
        return dict(self.messages[message_id])


@pytest.fixture
def fake_gmail():
    return FakeGmailClient
