from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Configuration consumed by the extraction pipeline.

    A missing API key is not an error: the model-backed path is simply
    unavailable and every request goes through the rule-based extractor.
    """

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    openai_base_url: str = "https://api.openai.com/v1"
    llm_timeout_s: float = 30.0
    llm_temperature: float = 0.1
    llm_max_tokens: int = 500

    # Diagnostics only, never changes extraction results.
    verbose: bool = False

    @property
    def model_configured(self) -> bool:
        return bool(self.openai_api_key)

    @staticmethod
    def from_env() -> "Settings":
        api_key = os.getenv("OPENAI_API_KEY", "").strip() or None
        return Settings(
            openai_api_key=api_key,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o").strip() or "gpt-4o",
            openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").strip().rstrip("/"),
            llm_timeout_s=_env_float("LLM_TIMEOUT_S", 30.0),
            llm_temperature=_env_float("LLM_TEMPERATURE", 0.1),
            llm_max_tokens=_env_int("LLM_MAX_TOKENS", 500),
            verbose=_env_bool("TASK_PARSER_VERBOSE") or _env_bool("DEBUG_MODE"),
        )


def get_settings() -> Settings:
    # Read on every call so tests (and reloads) can change the environment.
    return Settings.from_env()
