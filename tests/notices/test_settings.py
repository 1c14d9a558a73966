import json

import pytest

from notices.settings import DEFAULT_TARGET_URL, get_settings, reset_settings_cache


def test_defaults_without_environment():
    settings = get_settings()

    assert settings.default_target_url == DEFAULT_TARGET_URL
    assert settings.extraction_strategy == "all-elements"
    assert settings.extraction_max_items is None
    assert settings.extraction_max_items_per_selector == 10
    assert settings.scrape_run_deadline_seconds is None
    assert settings.render_navigation_timeout_seconds == 30
    assert settings.scrape_schedules == []


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("EXTRACTION_STRATEGY", "structural-selectors")
    monkeypatch.setenv("EXTRACTION_MAX_ITEMS", "25")
    monkeypatch.setenv("SCRAPE_RUN_DEADLINE_SECONDS", "90")
    monkeypatch.setenv(
        "SCRAPE_SCHEDULES",
        json.dumps([{"url": "https://gov.example/notices", "interval_minutes": 60}]),
    )

    settings = get_settings()

    assert settings.extraction_strategy == "structural-selectors"
    assert settings.extraction_max_items == 25
    assert settings.scrape_run_deadline_seconds == 90
    assert settings.scrape_schedules[0].url == "https://gov.example/notices"
    assert settings.scrape_schedules[0].enabled is True


def test_reset_settings_cache_reloads(monkeypatch):
    monkeypatch.setenv("DEFAULT_TARGET_URL", "https://first.example/")
    first = get_settings()
    assert first.default_target_url == "https://first.example/"

    monkeypatch.setenv("DEFAULT_TARGET_URL", "https://second.example/")
    assert get_settings().default_target_url == "https://first.example/"

    reset_settings_cache()
    assert get_settings().default_target_url == "https://second.example/"


def test_unknown_strategy_raises(monkeypatch):
    monkeypatch.setenv("EXTRACTION_STRATEGY", "every-link")

    with pytest.raises(RuntimeError):
        get_settings()


def test_duplicate_schedule_raises(monkeypatch):
    monkeypatch.setenv(
        "SCRAPE_SCHEDULES",
        json.dumps(
            [
                {"url": "https://gov.example/notices", "interval_minutes": 5},
                {"url": "https://gov.example/notices", "interval_minutes": 10},
            ]
        ),
    )

    with pytest.raises(RuntimeError) as exc:
        get_settings()

    assert "Duplicate scrape schedule" in str(exc.value)


def test_relative_schedule_url_rejected(monkeypatch):
    monkeypatch.setenv("SCRAPE_SCHEDULES", json.dumps([{"url": "/notices", "interval_minutes": 5}]))

    with pytest.raises(RuntimeError):
        get_settings()
