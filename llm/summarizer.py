"""Plain-language notice summaries with a deterministic fallback."""

from __future__ import annotations

import logging
from typing import Optional

from llm.client.openai_client import OpenAIClient, ProviderFn
from llm.prompts import build_summary_messages
from llm.settings import SummarySettings, get_summary_settings

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


def fallback_summary(content: str, limit: int = 200) -> str:
    """First ``limit`` characters plus an ellipsis, or the content itself if short enough."""
    if len(content) > limit:
        return content[:limit] + ELLIPSIS
    return content


class Summarizer:
    """Owns one OpenAI client; construct once per process and inject into the pipeline."""

    def __init__(self, client: OpenAIClient, *, fallback_chars: int = 200) -> None:
        self._client = client
        self._fallback_chars = fallback_chars

    @classmethod
    def from_settings(
        cls,
        settings: Optional[SummarySettings] = None,
        *,
        provider: Optional[ProviderFn] = None,
    ) -> "Summarizer":
        config = settings or get_summary_settings()
        return cls(OpenAIClient(config, provider=provider), fallback_chars=int(config.summary_fallback_chars))

    def fallback(self, content: str) -> str:
        return fallback_summary(content, self._fallback_chars)

    def summarize(self, content: str, title: str, *, timeout_seconds: Optional[float] = None) -> str:
        """Never raises; any failure of the model call yields the fallback text."""
        if timeout_seconds is not None and timeout_seconds <= 0:
            logger.info("summary.fallback", extra={"reason": "deadline_elapsed"})
            return self.fallback(content)
        try:
            completion = self._client.complete(
                build_summary_messages(title, content),
                timeout_seconds=timeout_seconds,
            )
        except Exception as exc:
            logger.warning(
                "summary.fallback",
                extra={"reason": type(exc).__name__, "error": str(exc)[:200]},
            )
            return self.fallback(content)
        return completion.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Summarizer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()
