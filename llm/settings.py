"""Settings for the summarization (OpenAI LLM) client."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, PositiveFloat, PositiveInt, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SummarySettings(BaseSettings):
    """Environment-driven configuration for notice summaries."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    openai_api_key: Optional[SecretStr] = Field(
        None,
        alias="OPENAI_API_KEY",
        description="OpenAI API key; without it every summary uses the fallback",
    )
    summary_model: str = Field("gpt-4o-mini", alias="SUMMARY_MODEL", description="OpenAI model name")
    summary_max_tokens: PositiveInt = Field(150, alias="SUMMARY_MAX_TOKENS", description="Max completion tokens")
    summary_temperature: float = Field(
        0.3, ge=0.0, le=2.0, alias="SUMMARY_TEMPERATURE", description="Sampling temperature"
    )
    summary_request_timeout_seconds: PositiveFloat = Field(
        15,
        alias="SUMMARY_REQUEST_TIMEOUT_SECONDS",
        description="Request timeout in seconds",
    )
    summary_fallback_chars: PositiveInt = Field(
        200, alias="SUMMARY_FALLBACK_CHARS", description="Truncation length of the fallback summary"
    )

    @field_validator("openai_api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, v):  # noqa: ANN001
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("summary_model")
    @classmethod
    def _non_empty_model(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("SUMMARY_MODEL must not be blank.")
        return s


@lru_cache()
def get_summary_settings() -> SummarySettings:
    try:
        return SummarySettings()
    except ValidationError as exc:
        raise RuntimeError(f"Summary settings validation failed: {exc}") from exc


def reset_summary_settings_cache() -> None:
    get_summary_settings.cache_clear()  # type: ignore[attr-defined]
