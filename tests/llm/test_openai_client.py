from __future__ import annotations

import time
from typing import Any, Dict

import pytest

from llm.client.openai_client import OpenAIClient, PermanentLLMError, TransientLLMError
from llm.prompts import build_summary_messages
from llm.settings import get_summary_settings, reset_summary_settings_cache

MESSAGES = build_summary_messages("Water supply interruption", "Supply off on Tuesday from 9am to 5pm.")


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    reset_summary_settings_cache()
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-123")
    monkeypatch.setenv("SUMMARY_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("SUMMARY_REQUEST_TIMEOUT_SECONDS", "5")
    yield
    reset_summary_settings_cache()


def _provider_ok(_: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "choices": [{"message": {"content": "  Water is off on Tuesday. Store water beforehand.  "}}],
        "usage": {"prompt_tokens": 120, "completion_tokens": 30},
        "model": "gpt-4o-mini",
    }


def test_complete_success_and_payload_shape():
    seen: Dict[str, Any] = {}

    def provider(payload: Dict[str, Any]) -> Dict[str, Any]:
        seen.update(payload)
        return _provider_ok(payload)

    client = OpenAIClient.from_env(provider=provider)
    completion = client.complete(MESSAGES)

    assert completion.text == "Water is off on Tuesday. Store water beforehand."
    assert completion.prompt_tokens == 120
    assert completion.model == "gpt-4o-mini"
    assert seen["max_tokens"] == 150
    assert seen["temperature"] == pytest.approx(0.3)
    assert seen["timeout"] == 5
    assert seen["messages"] == MESSAGES


def test_call_timeout_is_capped_by_caller():
    seen: Dict[str, Any] = {}

    def provider(payload: Dict[str, Any]) -> Dict[str, Any]:
        seen.update(payload)
        return _provider_ok(payload)

    OpenAIClient.from_env(provider=provider).complete(MESSAGES, timeout_seconds=1.5)

    assert seen["timeout"] == 1.5


def test_provider_exception_becomes_transient():
    def provider(_: Dict[str, Any]) -> Dict[str, Any]:
        raise ConnectionError("reset by peer")

    with pytest.raises(TransientLLMError):
        OpenAIClient.from_env(provider=provider).complete(MESSAGES)


@pytest.mark.parametrize(
    "response",
    [
        {},
        {"choices": []},
        {"choices": [{"message": {"content": "   "}}]},
        {"choices": [{"message": {"content": None}}]},
    ],
)
def test_malformed_or_empty_response_is_permanent(response):
    with pytest.raises(PermanentLLMError):
        OpenAIClient.from_env(provider=lambda _: response).complete(MESSAGES)


def test_missing_api_key_is_permanent(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY")
    reset_summary_settings_cache()

    client = OpenAIClient.from_env()

    assert get_summary_settings().openai_api_key is None
    with pytest.raises(PermanentLLMError):
        client.complete(MESSAGES)


def test_slow_provider_raises_transient(monkeypatch):
    def slow_provider(payload: Dict[str, Any]) -> Dict[str, Any]:
        time.sleep(0.2)
        return _provider_ok(payload)

    with pytest.raises(TransientLLMError):
        OpenAIClient.from_env(provider=slow_provider).complete(MESSAGES, timeout_seconds=0.05)


def test_no_time_left_skips_provider():
    calls = {"n": 0}

    def provider(payload: Dict[str, Any]) -> Dict[str, Any]:
        calls["n"] += 1
        return _provider_ok(payload)

    with pytest.raises(TransientLLMError):
        OpenAIClient.from_env(provider=provider).complete(MESSAGES, timeout_seconds=0)
    assert calls["n"] == 0
