"""Celery task and composition root for scrape runs."""

from __future__ import annotations

import uuid
from functools import lru_cache
from typing import Callable, Optional

from celery import shared_task

from llm.summarizer import Summarizer
from notices.db.session import init_db
from notices.models.domain import ScrapeResult
from notices.pipeline import ScrapePipeline
from notices.repositories.notifications import JobRunRecorder, SqlNoticeStore
from notices.settings import Settings, get_settings
from notices.utils.logging import get_logger

# Pipeline factory is kept pluggable for tests; it must return an object with .run(url, trace_id=...).
PIPELINE_FACTORY: Callable[[Settings], ScrapePipeline] | None = None


@lru_cache()
def _shared_summarizer() -> Summarizer:
    # one client per worker process
    return Summarizer.from_settings()


def build_pipeline(settings: Settings) -> ScrapePipeline:
    if PIPELINE_FACTORY is not None:
        return PIPELINE_FACTORY(settings)
    return ScrapePipeline.from_settings(
        settings,
        store=SqlNoticeStore(),
        summarizer=_shared_summarizer(),
    )


def scrape_core(url: Optional[str] = None, *, task_name: str = "scrape_notices") -> ScrapeResult:
    """Run one scrape and record it as a job run; test-friendly."""
    settings = get_settings()
    init_db(settings)
    target = url or settings.default_target_url
    trace_id = str(uuid.uuid4())
    logger = get_logger(__name__)
    logger.info("scrape.job.start", extra={"trace_id": trace_id, "url": target})
    pipeline = build_pipeline(settings)
    with JobRunRecorder(source_url=target, task_name=task_name, trace_id=trace_id) as recorder:
        result = pipeline.run(target, trace_id=trace_id)
        recorder.record(result)
    logger.info(
        "scrape.job.saved",
        extra={
            "trace_id": trace_id,
            "url": target,
            "candidates": result.total_candidates,
            "new_records": result.new_records,
        },
    )
    return result


@shared_task(name="notices.tasks.scrape.scrape_notices")
def scrape_notices(url: Optional[str] = None) -> dict:  # pragma: no cover - wrapper
    result = scrape_core(url)
    return {
        "url": result.url,
        "scraped_count": result.total_candidates,
        "new_notifications": result.new_records,
    }
