from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from inbox_insights.models import EmailAnalysis


class StrategyError(Exception):
    """Raised by a strategy that could not produce an analysis."""

    def __init__(self, strategy: str, message: str):
        super().__init__(f"{strategy}: {message}")
        self.strategy = strategy
        self.message = message


@dataclass(frozen=True)
class AnalysisRequest:
    subject: str
    body: str
    sender_email: str
    sender_name: str

    @property
    def email_text(self) -> str:
        # Prompt-style rendering shared by the external providers.
        return (
            f"Subject: {self.subject}\n"
            f"From: {self.sender_name} <{self.sender_email}>\n"
            f"Content: {self.body}"
        )


@dataclass(frozen=True)
class PartialAnalysis:
    """
    Subset of EmailAnalysis fields supplied by a strategy.
    Missing fields are filled from the rule-based analysis.
    """
    fields: Dict[str, Any] = field(default_factory=dict)


StrategyResult = Union[EmailAnalysis, PartialAnalysis]


class AnalysisStrategy(ABC):
    name: str = "base"

    def is_configured(self) -> bool:
        """Whether the credentials this strategy needs are present."""
        return True

    @abstractmethod
    async def analyze(self, request: AnalysisRequest) -> StrategyResult:
        """Produce a full or partial analysis, or raise."""
        raise NotImplementedError

    async def aclose(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, configured={self.is_configured()})"


def require_text(strategy: str, value: Optional[str], what: str) -> str:
    if not value or not value.strip():
        raise StrategyError(strategy, f"{what} was empty")
    return value
