from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Importing paths loads .env before any variable is read.
from inbox_insights.config.paths import TOKENS_PATH, resolve_path


DEFAULT_OPENAI_MODEL = "gpt-4.1-mini"
DEFAULT_HUGGINGFACE_BASE_URL = "https://api-inference.huggingface.co/models"
DEFAULT_REDIRECT_URI = "http://localhost:8080/api/auth/google/callback"


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    huggingface_api_key: Optional[str] = None
    huggingface_base_url: str = DEFAULT_HUGGINGFACE_BASE_URL
    # Per external call; on expiry the strategy counts as failed.
    strategy_timeout_s: float = 20.0
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_redirect_uri: str = DEFAULT_REDIRECT_URI
    session_secret: str = "change-me-in-production"
    max_results: int = 50
    insights_max_results: int = 100
    search_max_results: int = 20
    tokens_path: str = str(TOKENS_PATH)


def _optional(env: Mapping[str, str], key: str) -> Optional[str]:
    value = (env.get(key) or "").strip()
    return value or None


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{key} must be an integer, got {raw!r}") from exc


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{key} must be a number, got {raw!r}") from exc


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.
    Missing API keys simply disable the matching analysis strategy.
    """
    env = os.environ if env is None else env
    return Settings(
        openai_api_key=_optional(env, "OPENAI_API_KEY"),
        openai_model=_optional(env, "OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        huggingface_api_key=_optional(env, "HUGGINGFACE_API_KEY"),
        huggingface_base_url=_optional(env, "HUGGINGFACE_BASE_URL") or DEFAULT_HUGGINGFACE_BASE_URL,
        strategy_timeout_s=_float(env, "INBOX_INSIGHTS_STRATEGY_TIMEOUT", 20.0),
        google_client_id=_optional(env, "GOOGLE_CLIENT_ID"),
        google_client_secret=_optional(env, "GOOGLE_CLIENT_SECRET"),
        google_redirect_uri=_optional(env, "GOOGLE_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
        session_secret=_optional(env, "INBOX_INSIGHTS_SESSION_SECRET") or "change-me-in-production",
        max_results=_int(env, "INBOX_INSIGHTS_MAX_RESULTS", 50),
        insights_max_results=_int(env, "INBOX_INSIGHTS_INSIGHTS_MAX_RESULTS", 100),
        search_max_results=_int(env, "INBOX_INSIGHTS_SEARCH_MAX_RESULTS", 20),
        tokens_path=str(resolve_path(_optional(env, "INBOX_INSIGHTS_TOKENS_PATH") or TOKENS_PATH)),
    )
