from datetime import datetime

import httpx

from extraction.outcome import FailureReason
from llm.providers.base import LLMUnavailableError


def test_valid_reply(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory(
        '{"taskName": "Call about the proposal", "assignee": "John", '
        '"dueDate": "2026-10-20T15:00", "priority": "P2"}'
    )
    outcome = model_extractor_factory(provider).extract("call John about the proposal tomorrow 3pm P2")
    assert outcome.ok
    t = outcome.task
    assert t.task_name == "Call about the proposal"
    assert t.assignee == "John"
    assert t.due_date == datetime(2026, 10, 20, 15, 0)
    assert t.priority == "P2"


def test_single_exchange_with_dated_prompt(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory('{"taskName": "Buy milk", "priority": "P3"}')
    model_extractor_factory(provider).extract("buy milk")
    assert len(provider.calls) == 1
    assert provider.calls[0]["user"] == "buy milk"
    assert "2026-10-19" in provider.calls[0]["system"]


def test_fenced_reply_is_salvaged(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory('```json\n{"taskName": "Buy milk"}\n```')
    outcome = model_extractor_factory(provider).extract("buy milk")
    assert outcome.ok
    assert outcome.task.task_name == "Buy milk"
    assert outcome.task.priority == "P3"


def test_missing_task_name_defaults_to_input(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory('{"priority": "P1"}')
    outcome = model_extractor_factory(provider).extract("renew the domain")
    assert outcome.task.task_name == "renew the domain"
    assert outcome.task.priority == "P1"


def test_invalid_priority_defaults_to_medium(fake_provider_factory, model_extractor_factory):
    for raw_priority, expected in (("P9", "P3"), ("high", "P3"), (" p1 ", "P1")):
        provider = fake_provider_factory(f'{{"taskName": "Buy milk", "priority": "{raw_priority}"}}')
        assert model_extractor_factory(provider).extract("buy milk").task.priority == expected


def test_unparseable_due_date_is_dropped(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory('{"taskName": "Buy milk", "dueDate": "next friday-ish"}')
    outcome = model_extractor_factory(provider).extract("buy milk")
    assert outcome.ok
    assert outcome.task.due_date is None


def test_due_date_timezone_and_seconds_are_dropped(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory('{"taskName": "Buy milk", "dueDate": "2026-10-20T15:00:42Z"}')
    assert model_extractor_factory(provider).extract("buy milk").task.due_date == datetime(2026, 10, 20, 15, 0)


def test_garbage_reply_is_malformed(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory("THIS IS NOT JSON AT ALL")
    outcome = model_extractor_factory(provider).extract("random text")
    assert not outcome.ok
    assert outcome.failure.reason is FailureReason.MALFORMED_REPLY


def test_empty_reply(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory("   ")
    outcome = model_extractor_factory(provider).extract("random text")
    assert outcome.failure.reason is FailureReason.EMPTY_REPLY


def test_no_credential_skips_the_call(model_extractor_factory):
    outcome = model_extractor_factory(provider=None).extract("buy milk")
    assert outcome.failure.reason is FailureReason.UNCONFIGURED


def test_provider_reporting_unavailable(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory(error=LLMUnavailableError("OPENAI_API_KEY is missing"))
    outcome = model_extractor_factory(provider).extract("buy milk")
    assert outcome.failure.reason is FailureReason.UNCONFIGURED


def test_connection_error_is_transport_failure(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory(error=httpx.ConnectError("connection refused"))
    outcome = model_extractor_factory(provider).extract("buy milk")
    assert outcome.failure.reason is FailureReason.TRANSPORT


def test_error_status_is_transport_failure(fake_provider_factory, model_extractor_factory):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(429, request=request, text="rate limited")
    error = httpx.HTTPStatusError("429", request=request, response=response)
    outcome = model_extractor_factory(fake_provider_factory(error=error)).extract("buy milk")
    assert outcome.failure.reason is FailureReason.TRANSPORT
    assert "429" in outcome.failure.detail


def test_unexpected_envelope_is_transport_failure(fake_provider_factory, model_extractor_factory):
    provider = fake_provider_factory(error=KeyError("choices"))
    outcome = model_extractor_factory(provider).extract("buy milk")
    assert outcome.failure.reason is FailureReason.TRANSPORT
