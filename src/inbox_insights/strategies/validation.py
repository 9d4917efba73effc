from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from inbox_insights.models import CATEGORIES, SENTIMENTS, URGENCY_LEVELS
from inbox_insights.strategies.base import PartialAnalysis, StrategyError


MAX_LIST_ITEMS = 3

# EmailAnalysis fields where None is a real value; an explicit null here
# overrides the rule-based value instead of being backfilled.
NULLABLE_FIELDS = frozenset({"deadline", "suggested_response"})


def _enum_value(value: Any, allowed: tuple[str, ...], what: str) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip().lower().replace(" ", "_")
    if cleaned not in allowed:
        raise ValueError(f"unknown {what} {value!r}")
    return cleaned


def _string_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ValueError("expected a list of strings")
    items = [str(v).strip() for v in value if v is not None and str(v).strip()]
    # An explicit empty list is an answer ("nothing to do"), not a missing field.
    return items[:MAX_LIST_ITEMS]


class ExternalAnalysis(BaseModel):
    """
    Boundary model for analysis payloads returned by external providers.

    Every field is optional; only keys missing from the payload are later
    filled from the rule-based analysis. Present fields must have the right
    shape or the whole payload is rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    summary: Optional[str] = None
    action_items: Optional[List[str]] = Field(default=None, alias="actionItems")
    urgency_level: Optional[str] = Field(default=None, alias="urgencyLevel")
    suggested_response: Optional[str] = Field(default=None, alias="suggestedResponse")
    deadline: Optional[str] = None
    category: Optional[str] = None
    tips: Optional[List[str]] = None
    sentiment: Optional[str] = None
    estimated_read_time: Optional[str] = Field(default=None, alias="estimatedReadTime")

    @field_validator("action_items", "tips", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> Optional[List[str]]:
        return _string_list(value)

    @field_validator("urgency_level", mode="before")
    @classmethod
    def _urgency(cls, value: Any) -> Optional[str]:
        return _enum_value(value, URGENCY_LEVELS, "urgency level")

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: Any) -> Optional[str]:
        return _enum_value(value, CATEGORIES, "category")

    @field_validator("sentiment", mode="before")
    @classmethod
    def _sentiment(cls, value: Any) -> Optional[str]:
        return _enum_value(value, SENTIMENTS, "sentiment")

    @field_validator("deadline", mode="before")
    @classmethod
    def _deadline(cls, value: Any) -> Optional[str]:
        # Providers are asked for "none" when nothing was found.
        if value is None:
            return None
        text = str(value).strip()
        if not text or text.lower() in {"none", "null", "n/a"}:
            return None
        return text

    @field_validator("summary", "suggested_response", "estimated_read_time", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, (str, int, float)):
            raise ValueError("expected text")
        text = str(value).strip()
        return text or None

    def present_fields(self) -> Dict[str, Any]:
        # exclude_unset keeps keys the provider sent, even as null or [].
        supplied = self.model_dump(exclude_unset=True)
        return {k: v for k, v in supplied.items() if v is not None or k in NULLABLE_FIELDS}


def validate_payload(strategy: str, payload: Any) -> PartialAnalysis:
    """Validate a decoded provider payload; raise StrategyError on any violation."""
    if not isinstance(payload, dict):
        raise StrategyError(strategy, f"expected a JSON object, got {type(payload).__name__}")
    try:
        parsed = ExternalAnalysis.model_validate(payload)
    except ValidationError as exc:
        raise StrategyError(strategy, f"malformed analysis: {exc.error_count()} invalid field(s)") from exc

    fields = parsed.present_fields()
    if not fields:
        raise StrategyError(strategy, "response carried no analysis fields")
    return PartialAnalysis(fields=fields)


def parse_json_payload(strategy: str, text: Optional[str]) -> PartialAnalysis:
    if not text or not text.strip():
        raise StrategyError(strategy, "empty response")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StrategyError(strategy, f"response was not valid JSON ({exc.msg})") from exc
    return validate_payload(strategy, payload)
