"""LLM module - OpenAI client, settings and the notice summarizer."""

from llm.client.openai_client import (
    Completion,
    LLMError,
    OpenAIClient,
    PermanentLLMError,
    ProviderFn,
    TransientLLMError,
)
from llm.settings import SummarySettings, get_summary_settings
from llm.summarizer import Summarizer, fallback_summary

__all__ = [
    "Completion",
    "LLMError",
    "OpenAIClient",
    "PermanentLLMError",
    "ProviderFn",
    "TransientLLMError",
    "SummarySettings",
    "Summarizer",
    "fallback_summary",
    "get_summary_settings",
]
