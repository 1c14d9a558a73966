"""Celery application bootstrap for scheduled scrapes."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict
from urllib.parse import urlparse

from celery import Celery, signals
from celery.schedules import schedule as celery_schedule

from .settings import ScrapeSchedule, Settings, get_settings
from .utils.logging import configure_logging

_CELERY_APP: Celery | None = None


def create_celery_app(settings: Settings | None = None) -> Celery:
    """Build a Celery instance from settings."""
    config = settings or get_settings()
    configure_logging(config.log_level, json_enabled=config.log_json)

    app = Celery("notices", broker=config.redis_url, backend=config.redis_url)
    app.conf.update(
        task_default_queue="notices.default",
        task_default_exchange="notices",
        task_default_routing_key="notices.default",
        task_soft_time_limit=config.celery_task_soft_time_limit,
        worker_concurrency=config.celery_worker_concurrency,
        beat_schedule=_build_beat_schedule(config),
        timezone="UTC",
        enable_utc=True,
        worker_send_task_events=True,
        task_send_sent_event=True,
    )

    app.autodiscover_tasks(["notices.tasks"], related_name="scrape")
    _install_signal_handlers()
    return app


def get_celery_app() -> Celery:
    """Return the singleton Celery instance."""
    global _CELERY_APP
    if _CELERY_APP is None:
        _CELERY_APP = create_celery_app()
    return _CELERY_APP


def _build_beat_schedule(settings: Settings) -> Dict[str, Dict[str, Any]]:
    schedule: Dict[str, Dict[str, Any]] = {}
    for index, item in enumerate(settings.scrape_schedules):
        if not item.enabled:
            continue
        run_every = celery_schedule(timedelta(minutes=item.interval_minutes))
        schedule[_build_schedule_name(item, index)] = {
            "task": "notices.tasks.scrape.scrape_notices",
            "schedule": run_every,
            "args": (item.url,),
            "options": {"queue": "notices.scrape"},
        }
    return schedule


def _build_schedule_name(item: ScrapeSchedule, index: int) -> str:
    host = (urlparse(item.url).hostname or "unknown").lower()
    return f"scrape.{host}.{index}"


def _install_signal_handlers() -> None:
    logger = logging.getLogger("notices.worker")

    @signals.worker_shutdown.connect(weak=False)
    def _on_worker_shutdown(sender=None, **kwargs):  # noqa: ANN001
        logger.info("worker.shutdown", extra={"sender": str(sender)})
