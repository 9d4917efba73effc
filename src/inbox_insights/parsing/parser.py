from __future__ import annotations

import base64
from datetime import datetime, timezone
from email.utils import parseaddr, parsedate_to_datetime
from typing import Any, Dict, Optional, Tuple

from bs4 import BeautifulSoup

from inbox_insights.models import NormalizedEmail

HTML_TEXT_LIMIT = 1000
# Never part of the readable text; keyword rules must not see them.
NON_TEXT_TAGS = ["script", "style", "head"]


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(NON_TEXT_TAGS):
        tag.decompose()
    return soup.get_text(separator=" ", strip=True)


def extract_body_from_payload(payload: dict) -> str:
    """
    Extract plain text body from Gmail message payload.
    Falls back to tag-stripped HTML if plain text is unavailable.
    """
    def decode(data: str) -> str:
        return base64.urlsafe_b64decode(data).decode("utf-8", errors="replace")

    def find_part(part: dict, mime_type: str) -> Optional[str]:
        # Depth-first search through multipart payloads.
        if part.get("mimeType") == mime_type and part.get("body", {}).get("data"):
            return decode(part["body"]["data"])
        for child in part.get("parts", []) or []:
            found = find_part(child, mime_type)
            if found:
                return found
        return None

    if payload.get("body", {}).get("data"):
        return decode(payload["body"]["data"])

    text = find_part(payload, "text/plain")
    if text:
        return text

    html = find_part(payload, "text/html")
    if html:
        return html_to_text(html)[:HTML_TEXT_LIMIT]

    return ""


def parse_sender(value: str) -> Tuple[str, str]:
    """Split a From header into (display name, address)."""
    name, address = parseaddr(value or "")
    name = name.replace('"', "").strip()
    address = address.strip()
    if not address:
        # Unparseable header: keep the raw value as the address.
        return (name or "Unknown"), (value or "").strip()
    return (name or address), address


def parse_received_at(date_header: Optional[str], internal_date_ms: Any) -> datetime:
    if date_header:
        try:
            parsed = parsedate_to_datetime(date_header)
        except (TypeError, ValueError):
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    try:
        millis = int(internal_date_ms or 0)
    except (TypeError, ValueError):
        millis = 0
    if millis:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    return datetime.now(timezone.utc)


def normalize_message(msg: Dict[str, Any], *, account_email: str = "") -> NormalizedEmail:
    """Turn a Gmail `format=full` message resource into a NormalizedEmail."""
    payload = msg.get("payload", {}) or {}
    headers = {h.get("name"): h.get("value") for h in payload.get("headers", [])}

    subject = headers.get("Subject") or "No Subject"
    sender_name, sender_email = parse_sender(headers.get("From") or "Unknown Sender")
    snippet = msg.get("snippet", "") or ""
    body_text = extract_body_from_payload(payload) or snippet
    label_ids = [str(x) for x in (msg.get("labelIds") or [])]

    return NormalizedEmail(
        message_id=str(msg.get("id") or ""),
        subject=subject,
        body_text=body_text,
        snippet=snippet,
        sender_email=sender_email,
        sender_name=sender_name,
        received_at=parse_received_at(headers.get("Date"), msg.get("internalDate")),
        is_unread="UNREAD" in label_ids,
        account_email=account_email,
        label_ids=label_ids,
    )


def _parse_iso(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def normalize_record(record: Dict[str, Any], *, index: int = 0) -> NormalizedEmail:
    """
    Build a NormalizedEmail from a plain {subject, body, senderEmail, senderName}
    record (camelCase or snake_case keys).
    """
    def pick(*keys: str, default: Any = "") -> Any:
        for key in keys:
            if record.get(key) is not None:
                return record[key]
        return default

    body = str(pick("bodyText", "body_text", "body"))
    snippet = str(pick("snippet", default=body[:200]))
    return NormalizedEmail(
        message_id=str(pick("id", "messageId", "message_id", default=f"record-{index}")),
        subject=str(pick("subject")),
        body_text=body,
        snippet=snippet,
        sender_email=str(pick("senderEmail", "sender_email")),
        sender_name=str(pick("senderName", "sender_name", "sender", default="Unknown")),
        received_at=_parse_iso(pick("receivedAt", "received_at", default=None)) or datetime.now(timezone.utc),
        is_unread=bool(pick("isUnread", "is_unread", default=False)),
        account_email=str(pick("accountEmail", "account_email")),
    )
