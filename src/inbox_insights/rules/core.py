from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class MailText:
    subject: str
    text: str          # body, snippet or both; whatever the caller has
    sender_email: str

    @property
    def haystack(self) -> str:
        """Lower-cased "subject text" blob every keyword rule matches against."""
        return f"{self.subject or ''} {self.text or ''}".lower()

    @property
    def domain(self) -> str:
        _, sep, domain = (self.sender_email or "").partition("@")
        return domain.lower() if sep else ""
