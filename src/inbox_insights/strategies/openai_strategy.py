from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from inbox_insights.models import CATEGORIES, SENTIMENTS, URGENCY_LEVELS
from inbox_insights.strategies.base import AnalysisRequest, AnalysisStrategy, PartialAnalysis, StrategyError
from inbox_insights.strategies.validation import parse_json_payload

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are an assistant specialized in helping freelancers manage their emails. "
    "Focus on the freelancing context: clients, projects, payments, deadlines and opportunities. "
    "Return ONLY JSON that matches the provided schema."
)

# Structured Outputs (JSON Schema) so parsing is reliable
ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "summary": {"type": "string"},
        "actionItems": {"type": "array", "items": {"type": "string"}},
        "urgencyLevel": {"type": "string", "enum": list(URGENCY_LEVELS)},
        "suggestedResponse": {"type": ["string", "null"]},
        "deadline": {"type": ["string", "null"]},
        "category": {"type": "string", "enum": list(CATEGORIES)},
        "tips": {"type": "array", "items": {"type": "string"}},
        "sentiment": {"type": "string", "enum": list(SENTIMENTS)},
        "estimatedReadTime": {"type": "string"},
    },
    "required": [
        "summary",
        "actionItems",
        "urgencyLevel",
        "suggestedResponse",
        "deadline",
        "category",
        "tips",
        "sentiment",
        "estimatedReadTime",
    ],
}


def build_user_prompt(request: AnalysisRequest) -> str:
    return (
        f"{request.email_text}\n\n"
        "Analyze this email and provide:\n"
        "1. summary: a concise 1-2 sentence summary\n"
        "2. actionItems: specific action items (max 3)\n"
        "3. urgencyLevel: critical/high/medium/low\n"
        "4. suggestedResponse: brief suggested response if action is needed, else null\n"
        "5. deadline: any mentioned deadline (YYYY-MM-DD) or null\n"
        "6. category: client_work/job_opportunity/payment/meeting/marketing/personal/other\n"
        "7. tips: 2-3 actionable tips for the freelancer\n"
        "8. sentiment: positive/neutral/negative\n"
        "9. estimatedReadTime: \"X min read\""
    )


class OpenAIStrategy(AnalysisStrategy):
    """Full analysis through the OpenAI Responses API."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = "gpt-4.1-mini",
        timeout_s: float = 20.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._timeout_s = timeout_s
        self._client = client

    def is_configured(self) -> bool:
        return bool(self._api_key) or self._client is not None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise StrategyError(self.name, "OPENAI_API_KEY is not configured")
            # No SDK-level retries: a failed call falls through to the next strategy.
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout_s, max_retries=0)
        return self._client

    async def analyze(self, request: AnalysisRequest) -> PartialAnalysis:
        try:
            resp = await self.client.responses.create(
                model=self._model,
                input=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(request)},
                ],
                temperature=0.3,
                max_output_tokens=500,
                text={
                    "format": {
                        "type": "json_schema",
                        "name": "email_analysis",
                        "strict": True,
                        "schema": ANALYSIS_SCHEMA,
                    }
                },
            )
        except OpenAIError as exc:
            raise StrategyError(self.name, f"{type(exc).__name__}: {exc}") from exc

        output_text = getattr(resp, "output_text", None)
        return parse_json_payload(self.name, output_text)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
