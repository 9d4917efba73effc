from __future__ import annotations

import math

SUMMARY_LIMIT = 150


def summarize(body: str, sender_name: str, subject: str) -> str:
    """
    Truncating summarizer: first 150 characters of the body.
    An empty body falls back to a sender/subject line.
    """
    body = body or ""
    if len(body) > SUMMARY_LIMIT:
        return f"{body[:SUMMARY_LIMIT]}..."
    if body:
        return body
    return f"Email from {sender_name} regarding: {subject}"


def estimate_read_time(body: str) -> str:
    minutes = math.ceil(len(body or "") / 1000)
    return f"{minutes} min read"
