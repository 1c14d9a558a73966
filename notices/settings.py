"""Configuration models for the notice scraping service."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, List, Literal, Optional, Set

from pydantic import (
    BaseModel,
    Field,
    PositiveFloat,
    PositiveInt,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TARGET_URL = "https://webscraper.io/test-sites/e-commerce/allinone/computers"

ExtractionStrategyName = Literal["all-elements", "structural-selectors"]


class ScrapeSchedule(BaseModel):
    """Represents a periodic scrape job configuration."""

    url: str = Field(..., description="Absolute URL of the page to scrape.")
    interval_minutes: PositiveInt = Field(..., description="Scrape interval in minutes.")
    enabled: bool = Field(True, description="Whether the schedule is active.")

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        url = value.strip()
        if "://" not in url:
            raise ValueError("url must be an absolute URL.")
        return url


class Settings(BaseSettings):
    """Environment settings for the scraping pipeline."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    database_url: str = Field(
        "sqlite:///./var/storage/notices.db",
        alias="DATABASE_URL",
        description="SQLAlchemy database URL for stored notices.",
    )
    redis_url: str = Field(
        "redis://localhost:6379/0",
        alias="SCRAPER_REDIS_URL",
        description="Celery broker/backend Redis DSN.",
    )
    default_target_url: str = Field(
        DEFAULT_TARGET_URL,
        alias="DEFAULT_TARGET_URL",
        description="Page scraped when the caller omits a URL.",
    )
    render_navigation_timeout_seconds: PositiveFloat = Field(
        30,
        alias="RENDER_NAVIGATION_TIMEOUT_SECONDS",
        description="Upper bound for page navigation including network idle wait.",
    )
    render_quiescence_ms: int = Field(
        0,
        ge=0,
        alias="RENDER_QUIESCENCE_MS",
        description="Extra settle time after network idle (milliseconds).",
    )
    render_headless: bool = Field(True, alias="RENDER_HEADLESS", description="Run the browser headless.")
    render_user_agent: Optional[str] = Field(None, alias="RENDER_USER_AGENT", description="Browser user agent override.")
    extraction_strategy: ExtractionStrategyName = Field(
        "all-elements",
        alias="EXTRACTION_STRATEGY",
        description="Candidate extraction policy.",
    )
    extraction_max_items: Optional[PositiveInt] = Field(
        None,
        alias="EXTRACTION_MAX_ITEMS",
        description="Overall candidate cap for one page (unset = uncapped).",
    )
    extraction_max_items_per_selector: PositiveInt = Field(
        10,
        alias="EXTRACTION_MAX_ITEMS_PER_SELECTOR",
        description="Per-selector cap for the structural-selectors strategy.",
    )
    scrape_run_deadline_seconds: Optional[PositiveFloat] = Field(
        None,
        alias="SCRAPE_RUN_DEADLINE_SECONDS",
        description="Overall deadline for one scrape run.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="Log level.")
    log_json: bool = Field(False, alias="LOG_JSON", description="Emit logs as JSON lines.")
    scrape_schedules: List[ScrapeSchedule] = Field(
        default_factory=list,
        alias="SCRAPE_SCHEDULES",
        description="JSON array of scheduled scrapes.",
    )
    celery_worker_concurrency: PositiveInt = Field(
        1,
        alias="CELERY_WORKER_CONCURRENCY",
        description="Celery worker concurrency (one browser per task).",
    )
    celery_task_soft_time_limit: PositiveInt = Field(
        300,
        alias="CELERY_TASK_SOFT_TIME_LIMIT",
        description="Celery task soft time limit (seconds).",
    )

    @field_validator("scrape_schedules", mode="before")
    @classmethod
    def _parse_scrape_schedules(cls, value: Any) -> List[Any]:
        if value in (None, "", []):
            return []
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError("SCRAPE_SCHEDULES must be a JSON array.") from exc
            return parsed
        if isinstance(value, list):
            return value
        raise ValueError("SCRAPE_SCHEDULES must be a list.")

    @field_validator("scrape_schedules")
    @classmethod
    def _validate_unique_schedule(cls, value: List[ScrapeSchedule]) -> List[ScrapeSchedule]:
        seen: Set[str] = set()
        for schedule in value:
            if schedule.url in seen:
                raise ValueError(f"Duplicate scrape schedule: {schedule.url}")
            seen.add(schedule.url)
        return value

    @field_validator("database_url")
    @classmethod
    def _validate_database_url(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError("DATABASE_URL must be a valid DSN string.")
        return value

    @field_validator("default_target_url")
    @classmethod
    def _validate_target_url(cls, value: str) -> str:
        url = value.strip()
        if "://" not in url:
            raise ValueError("DEFAULT_TARGET_URL must be an absolute URL.")
        return url


@lru_cache()
def get_settings() -> Settings:
    """Return a Settings instance built from the environment."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Environment validation failed: {exc}") from exc


def reset_settings_cache() -> None:
    """Clear the Settings LRU cache (for tests)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
