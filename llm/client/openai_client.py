"""OpenAI chat-completion client wrapper.

- One attempt per call; callers decide what to do on failure
- Request timeout enforced both at transport level and on elapsed time
- Provider injection keeps tests free of network access
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from llm.settings import SummarySettings, get_summary_settings


class LLMError(Exception):
    """Base error for LLM calls."""


class TransientLLMError(LLMError):
    """Timeout, rate limit or network hiccup."""


class PermanentLLMError(LLMError):
    """Missing credentials, malformed response or other non-recoverable error."""


ProviderFn = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class Completion:
    text: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0


@dataclass
class OpenAIClient:
    settings: SummarySettings
    provider: Optional[ProviderFn] = None
    _sdk_client: Any = field(default=None, init=False, repr=False)

    @classmethod
    def from_env(cls, provider: Optional[ProviderFn] = None) -> "OpenAIClient":
        return cls(get_summary_settings(), provider=provider)

    def _get_provider(self) -> ProviderFn:
        if self.provider is not None:
            return self.provider
        if self.settings.openai_api_key is None:
            raise PermanentLLMError("OPENAI_API_KEY is not configured.")
        if self._sdk_client is None:
            from openai import OpenAI

            self._sdk_client = OpenAI(
                api_key=self.settings.openai_api_key.get_secret_value(),
                timeout=float(self.settings.summary_request_timeout_seconds),
                max_retries=0,
            )
        client = self._sdk_client

        def _call(payload: Dict[str, Any]) -> Dict[str, Any]:  # pragma: no cover - network
            import openai

            try:
                resp = client.chat.completions.create(**payload)
            except (openai.APITimeoutError, openai.RateLimitError, openai.APIConnectionError) as exc:
                raise TransientLLMError(f"OpenAI request failed: {exc}") from exc
            except openai.OpenAIError as exc:
                raise PermanentLLMError(f"OpenAI request rejected: {exc}") from exc
            return {
                "choices": [{"message": {"content": resp.choices[0].message.content}}],
                "usage": {
                    "prompt_tokens": getattr(resp.usage, "prompt_tokens", 0),
                    "completion_tokens": getattr(resp.usage, "completion_tokens", 0),
                },
                "model": resp.model,
            }

        return _call

    def _build_payload(
        self,
        messages: List[dict],
        *,
        max_tokens: Optional[int],
        temperature: Optional[float],
        timeout: float,
    ) -> Dict[str, Any]:
        return {
            "model": self.settings.summary_model,
            "messages": messages,
            "max_tokens": int(max_tokens or self.settings.summary_max_tokens),
            "temperature": float(self.settings.summary_temperature if temperature is None else temperature),
            "timeout": timeout,
        }

    def complete(
        self,
        messages: List[dict],
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ) -> Completion:
        timeout = float(self.settings.summary_request_timeout_seconds)
        if timeout_seconds is not None:
            timeout = min(timeout, timeout_seconds)
        if timeout <= 0:
            raise TransientLLMError("No time left for the LLM request.")

        payload = self._build_payload(messages, max_tokens=max_tokens, temperature=temperature, timeout=timeout)
        provider = self._get_provider()

        start = time.monotonic()
        try:
            resp = provider(payload)
        except LLMError:
            raise
        except Exception as exc:
            raise TransientLLMError(f"LLM provider failed: {exc}") from exc
        if time.monotonic() - start > timeout:
            raise TransientLLMError("LLM request timeout exceeded")

        try:
            content = resp["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise PermanentLLMError("Malformed LLM response") from exc
        if not isinstance(content, str) or not content.strip():
            raise PermanentLLMError("Empty LLM response")

        usage = resp.get("usage") or {}
        return Completion(
            text=content.strip(),
            model=resp.get("model") or self.settings.summary_model,
            prompt_tokens=int(usage.get("prompt_tokens", 0)),
            completion_tokens=int(usage.get("completion_tokens", 0)),
        )

    def close(self) -> None:
        if self._sdk_client is not None:
            self._sdk_client.close()
            self._sdk_client = None
