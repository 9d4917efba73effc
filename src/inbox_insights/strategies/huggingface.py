from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from inbox_insights.strategies.base import (
    AnalysisRequest,
    AnalysisStrategy,
    PartialAnalysis,
    StrategyError,
    require_text,
)
from inbox_insights.strategies.validation import validate_payload

logger = logging.getLogger(__name__)


SUMMARIZATION_MODEL = "facebook/bart-large-cnn"
SENTIMENT_MODEL = "cardiffnlp/twitter-roberta-base-sentiment-latest"

SUMMARY_INPUT_LIMIT = 1000
SENTIMENT_INPUT_LIMIT = 500


def sentiment_from_label(label: Optional[str]) -> str:
    lowered = (label or "").lower()
    if "positive" in lowered:
        return "positive"
    if "negative" in lowered:
        return "negative"
    return "neutral"


def _top_label(payload: Any) -> Optional[str]:
    # text-classification answers either [{label, score}, ...] or [[{...}, ...]].
    if isinstance(payload, list) and payload:
        first = payload[0]
        if isinstance(first, list) and first:
            first = first[0]
        if isinstance(first, dict):
            label = first.get("label")
            return str(label) if label is not None else None
    return None


def _summary_text(payload: Any) -> Optional[str]:
    if isinstance(payload, list) and payload:
        payload = payload[0]
    if isinstance(payload, dict):
        text = payload.get("summary_text")
        return str(text) if text is not None else None
    return None


class HuggingFaceStrategy(AnalysisStrategy):
    """
    Summary and sentiment from the Hugging Face Inference API.

    Only supplies {summary, sentiment}; the chain fills the remaining fields
    from the rule-based analysis.
    """

    name = "huggingface"

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = "https://api-inference.huggingface.co/models",
        timeout_s: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    async def _infer(self, client: httpx.AsyncClient, model: str, inputs: str) -> Any:
        try:
            resp = await client.post(f"{self._base_url}/{model}", json={"inputs": inputs})
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            raise StrategyError(self.name, f"{model} returned HTTP {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            raise StrategyError(self.name, f"{model} request failed: {exc}") from exc
        except ValueError as exc:
            raise StrategyError(self.name, f"{model} returned non-JSON body") from exc

    async def analyze(self, request: AnalysisRequest) -> PartialAnalysis:
        if not self._api_key:
            raise StrategyError(self.name, "HUGGINGFACE_API_KEY is not configured")

        email_text = request.email_text
        async with httpx.AsyncClient(
            headers=self._headers(),
            timeout=self._timeout_s,
            transport=self._transport,
        ) as client:
            summary_payload = await self._infer(
                client, SUMMARIZATION_MODEL, email_text[:SUMMARY_INPUT_LIMIT]
            )
            sentiment_payload = await self._infer(
                client,
                SENTIMENT_MODEL,
                f"{request.subject} {email_text[:SENTIMENT_INPUT_LIMIT]}",
            )

        summary = _summary_text(summary_payload) or email_text[:150]
        summary = require_text(self.name, summary, "summary")
        sentiment = sentiment_from_label(_top_label(sentiment_payload))
        logger.debug("huggingface analysis sentiment=%s summary_len=%d", sentiment, len(summary))

        return validate_payload(self.name, {"summary": summary, "sentiment": sentiment})
