from __future__ import annotations

import asyncio

from inbox_insights.config.settings import Settings
from inbox_insights.models import EmailAnalysis
from inbox_insights.pipeline.orchestrator import FallbackChain, build_default_chain, overlay
from inbox_insights.strategies.base import AnalysisRequest, AnalysisStrategy, PartialAnalysis
from inbox_insights.strategies.rules import analyze_with_rules
from inbox_insights.strategies.validation import validate_payload

REQUEST = AnalysisRequest(
    subject="Zoom call about the invoice",
    body="Can we schedule a call this week?",
    sender_email="pm@acme.io",
    sender_name="PM",
)


class FailingStrategy(AnalysisStrategy):
    name = "provider_a"

    def __init__(self) -> None:
        self.calls = 0

    async def analyze(self, request: AnalysisRequest):
        self.calls += 1
        raise ConnectionError("network down")


class UnconfiguredStrategy(AnalysisStrategy):
    name = "provider_b"

    def is_configured(self) -> bool:
        return False

    async def analyze(self, request: AnalysisRequest):
        raise AssertionError("unconfigured strategies must not be called")


class PartialStrategy(AnalysisStrategy):
    name = "partial"

    async def analyze(self, request: AnalysisRequest) -> PartialAnalysis:
        return PartialAnalysis(fields={"summary": "From provider", "sentiment": "positive"})


class FullStrategy(AnalysisStrategy):
    name = "full"

    def __init__(self, analysis: EmailAnalysis) -> None:
        self.analysis = analysis

    async def analyze(self, request: AnalysisRequest) -> EmailAnalysis:
        return self.analysis


class SlowStrategy(AnalysisStrategy):
    name = "slow"

    async def analyze(self, request: AnalysisRequest):
        await asyncio.sleep(5)
        raise AssertionError("should have timed out")


class WrongTypeStrategy(AnalysisStrategy):
    name = "wrong"

    async def analyze(self, request: AnalysisRequest):
        return {"summary": "raw dict"}


def test_failing_provider_falls_through_to_rules() -> None:
    failing = FailingStrategy()
    chain = FallbackChain([failing, UnconfiguredStrategy()])

    outcome = asyncio.run(chain.run(REQUEST))

    assert failing.calls == 1
    assert outcome.strategy == "rules"
    assert outcome.analysis.sentiment == "neutral"
    assert outcome.analysis == analyze_with_rules(REQUEST.subject, REQUEST.body, REQUEST.sender_email, "PM")
    assert len(outcome.failures) == 1
    assert "network down" in outcome.failures[0]


def test_partial_result_is_overlaid_on_rule_analysis() -> None:
    outcome = asyncio.run(FallbackChain([PartialStrategy()]).run(REQUEST))
    baseline = analyze_with_rules(REQUEST.subject, REQUEST.body, REQUEST.sender_email, "PM")

    assert outcome.strategy == "partial"
    assert outcome.analysis.summary == "From provider"
    assert outcome.analysis.sentiment == "positive"
    assert outcome.analysis.tips == baseline.tips
    assert outcome.analysis.category == baseline.category
    assert outcome.analysis.action_items == baseline.action_items


def test_first_successful_strategy_wins() -> None:
    analysis = analyze_with_rules("x", "y", "z@w.io", "Z")
    failing = FailingStrategy()
    chain = FallbackChain([FullStrategy(analysis), failing])

    outcome = asyncio.run(chain.run(REQUEST))

    assert outcome.strategy == "full"
    assert outcome.analysis is analysis
    assert failing.calls == 0


def test_timeout_counts_as_failure() -> None:
    chain = FallbackChain([SlowStrategy()], timeout_s=0.01)
    outcome = asyncio.run(chain.run(REQUEST))
    assert outcome.strategy == "rules"
    assert "timed out" in outcome.failures[0]


def test_unexpected_result_type_counts_as_failure() -> None:
    outcome = asyncio.run(FallbackChain([WrongTypeStrategy()]).run(REQUEST))
    assert outcome.strategy == "rules"
    assert outcome.failures


def test_no_retries_within_one_request() -> None:
    failing = FailingStrategy()
    asyncio.run(FallbackChain([failing]).analyze(REQUEST))
    assert failing.calls == 1


def test_overlay_keeps_unspecified_fields() -> None:
    base = analyze_with_rules("Job offer", "", "hr@acme.io", "HR")
    merged = overlay(base, PartialAnalysis(fields={"urgency_level": "critical"}))
    assert merged.urgency_level == "critical"
    assert merged.category == base.category
    assert merged.tips == base.tips


def test_default_chain_follows_configured_keys() -> None:
    assert build_default_chain(Settings()).active_strategies() == ["rules"]
    assert build_default_chain(Settings(openai_api_key="sk")).active_strategies() == ["openai", "rules"]
    both = build_default_chain(Settings(openai_api_key="sk", huggingface_api_key="hf"))
    assert both.active_strategies() == ["openai", "huggingface", "rules"]


class ExplicitEmptyStrategy(AnalysisStrategy):
    name = "openai"

    async def analyze(self, request: AnalysisRequest) -> PartialAnalysis:
        return validate_payload(
            self.name,
            {
                "summary": "Nothing needed from you.",
                "actionItems": [],
                "urgencyLevel": "low",
                "suggestedResponse": None,
                "deadline": "none",
                "category": "client_work",
                "tips": [],
                "sentiment": "neutral",
                "estimatedReadTime": "1 min read",
            },
        )


def test_explicit_empty_provider_answers_are_not_backfilled() -> None:
    request = AnalysisRequest(
        subject="Please review and reply",
        body="Schedule a meeting, payment due: march 5",
        sender_email="client@upwork.com",
        sender_name="Client",
    )
    baseline = analyze_with_rules(request.subject, request.body, request.sender_email, request.sender_name)
    assert baseline.action_items and baseline.deadline and baseline.suggested_response

    outcome = asyncio.run(FallbackChain([ExplicitEmptyStrategy()]).run(request))

    assert outcome.strategy == "openai"
    assert outcome.analysis.action_items == []
    assert outcome.analysis.tips == []
    assert outcome.analysis.deadline is None
    assert outcome.analysis.suggested_response is None
