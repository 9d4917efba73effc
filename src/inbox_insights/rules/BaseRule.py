from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from inbox_insights.rules.core import MailText


class BaseRule(ABC):
    """
    Base class for category rules.

    A rule maps a mail onto exactly one category. Rules are evaluated in
    descending priority and the first match wins, so priority is resolution
    order, not confidence.
    """

    # Unique, shows up in match reasons
    name: str = "base_rule"

    # Category assigned when the rule matches
    category: str = "other"

    # Higher runs earlier
    priority: int = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, priority={self.priority})"

    @staticmethod
    def first_hit(text: str | None, needles: Sequence[str]) -> str:
        """First needle found in text (case-insensitive), or "" when none is."""
        t = (text or "").lower()
        for n in needles:
            if n.lower() in t:
                return n
        return ""

    @abstractmethod
    def match(self, mail: MailText) -> tuple[bool, str]:
        """Return (matched, reason)."""
        raise NotImplementedError


class KeywordRule(BaseRule):
    """Matches on keywords in subject/body, then on sender domain fragments."""

    keywords: Sequence[str] = ()
    domain_markers: Sequence[str] = ()

    def match(self, mail: MailText) -> tuple[bool, str]:
        hit = self.first_hit(mail.haystack, self.keywords)
        if hit:
            return True, f"text mentions {hit!r}"
        hit = self.first_hit(mail.domain, self.domain_markers)
        if hit:
            return True, f"sender domain contains {hit!r}"
        return False, ""
