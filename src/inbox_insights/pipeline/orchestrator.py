from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from inbox_insights.config.settings import Settings
from inbox_insights.models import EmailAnalysis, NormalizedEmail
from inbox_insights.strategies.base import (
    AnalysisRequest,
    AnalysisStrategy,
    PartialAnalysis,
    StrategyError,
    StrategyResult,
)
from inbox_insights.strategies.huggingface import HuggingFaceStrategy
from inbox_insights.strategies.openai_strategy import OpenAIStrategy
from inbox_insights.strategies.rules import RuleBasedStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainOutcome:
    analysis: EmailAnalysis
    strategy: str
    failures: List[str] = field(default_factory=list)


def request_for(email: NormalizedEmail) -> AnalysisRequest:
    return AnalysisRequest(
        subject=email.subject,
        body=email.body_text or email.snippet,
        sender_email=email.sender_email,
        sender_name=email.sender_name,
    )


def overlay(base: EmailAnalysis, partial: PartialAnalysis) -> EmailAnalysis:
    """Provider fields win; everything they left out comes from `base`."""
    return replace(base, **partial.fields)


class FallbackChain:
    """
    Ordered analysis strategies, tried until one succeeds.

    Unconfigured strategies are skipped. A failure (exception or timeout)
    moves on to the next strategy immediately; there are no retries. The
    rule-based strategy always closes the chain.
    """

    def __init__(
        self,
        strategies: Sequence[AnalysisStrategy],
        *,
        timeout_s: Optional[float] = None,
    ):
        self._rules = RuleBasedStrategy()
        # External strategies only; rules are appended implicitly.
        self._strategies = [s for s in strategies if not isinstance(s, RuleBasedStrategy)]
        self._timeout_s = timeout_s

    @property
    def strategies(self) -> List[AnalysisStrategy]:
        return [*self._strategies, self._rules]

    def active_strategies(self) -> List[str]:
        return [s.name for s in self.strategies if s.is_configured()]

    async def _attempt(self, strategy: AnalysisStrategy, request: AnalysisRequest) -> StrategyResult:
        call = strategy.analyze(request)
        if self._timeout_s is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._timeout_s)
        except asyncio.TimeoutError as exc:
            raise StrategyError(strategy.name, f"timed out after {self._timeout_s}s") from exc

    async def run(self, request: AnalysisRequest) -> ChainOutcome:
        failures: List[str] = []
        # Computed once: terminal fallback and backfill for partial results.
        baseline = self._rules.analyze_sync(request)

        for strategy in self._strategies:
            if not strategy.is_configured():
                continue
            try:
                result = await self._attempt(strategy, request)
                if isinstance(result, PartialAnalysis):
                    analysis = overlay(baseline, result)
                elif isinstance(result, EmailAnalysis):
                    analysis = result
                else:
                    raise StrategyError(strategy.name, f"unexpected result type {type(result).__name__}")
            except Exception as exc:
                failures.append(f"{strategy.name}: {exc}")
                logger.warning("analysis strategy %s failed, falling back: %s", strategy.name, exc)
                continue
            return ChainOutcome(analysis=analysis, strategy=strategy.name, failures=failures)

        return ChainOutcome(analysis=baseline, strategy=self._rules.name, failures=failures)

    async def analyze(self, request: AnalysisRequest) -> EmailAnalysis:
        outcome = await self.run(request)
        return outcome.analysis

    async def analyze_email(self, email: NormalizedEmail) -> EmailAnalysis:
        return await self.analyze(request_for(email))

    async def aclose(self) -> None:
        for strategy in self._strategies:
            await strategy.aclose()


def build_default_chain(settings: Settings) -> FallbackChain:
    """OpenAI, then Hugging Face, then rules; missing keys just skip a step."""
    return FallbackChain(
        [
            OpenAIStrategy(
                settings.openai_api_key,
                model=settings.openai_model,
                timeout_s=settings.strategy_timeout_s,
            ),
            HuggingFaceStrategy(
                settings.huggingface_api_key,
                base_url=settings.huggingface_base_url,
                timeout_s=settings.strategy_timeout_s,
            ),
        ],
        timeout_s=settings.strategy_timeout_s,
    )
