"""Government notice scraping package bootstrap."""

from .settings import ScrapeSchedule, Settings, get_settings, reset_settings_cache  # noqa: F401

__all__ = [
    "ScrapeSchedule",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
