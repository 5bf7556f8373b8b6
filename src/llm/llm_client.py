from __future__ import annotations

from typing import Optional

from llm.providers.base import LLMProvider, LLMUnavailableError
from llm.providers.openai_provider import OpenAIProvider
from task_manager.settings import Settings, get_settings


class LLMClient:
    """Single-exchange text completion on top of a pluggable provider.

    Tests pass a fake ``provider``; otherwise an OpenAI provider is built
    lazily from settings on the first call.
    """

    def __init__(self, provider: Optional[LLMProvider] = None, settings: Optional[Settings] = None):
        self._provider = provider
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def is_configured(self) -> bool:
        return self._provider is not None or self.settings.model_configured

    def _get_provider(self) -> LLMProvider:
        if self._provider is not None:
            return self._provider
        s = self.settings
        if not s.model_configured:
            raise LLMUnavailableError("OPENAI_API_KEY is missing")
        self._provider = OpenAIProvider(
            api_key=s.openai_api_key,
            model=s.openai_model,
            base_url=s.openai_base_url,
            timeout_s=s.llm_timeout_s,
            temperature=s.llm_temperature,
            max_tokens=s.llm_max_tokens,
        )
        return self._provider

    def complete(self, *, system: str, user: str) -> str:
        """Send one system+user exchange and return the raw reply text.

        Raises LLMUnavailableError without a credential and httpx.HTTPError on
        transport failures. No retries.
        """
        return self._get_provider().generate(system=system, user=user)
