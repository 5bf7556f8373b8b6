from datetime import datetime

import pytest

from extraction.model_extractor import ModelBackedExtractor
from extraction.rule_extractor import RuleBasedExtractor
from llm.llm_client import LLMClient
from task_manager.settings import Settings

# A Monday.
FROZEN_NOW = datetime(2026, 10, 19, 10, 30)


class FakeProvider:
    def __init__(self, response_text: str = "", error: Exception | None = None):
        self._response_text = response_text
        self._error = error
        self.calls = []

    def generate(self, *, system: str, user: str) -> str:
        self.calls.append({"system": system, "user": user})
        if self._error is not None:
            raise self._error
        return self._response_text


@pytest.fixture
def clock():
    return lambda: FROZEN_NOW


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str = "", error: Exception | None = None):
        return FakeProvider(response_text, error)
    return _make


@pytest.fixture
def rules(clock):
    return RuleBasedExtractor(clock=clock)


@pytest.fixture
def model_extractor_factory(clock):
    def _make(provider=None):
        # No API key in these settings: without a provider the model path is unconfigured.
        client = LLMClient(provider=provider, settings=Settings())
        return ModelBackedExtractor(llm_client=client, clock=clock, verbose=False)
    return _make
