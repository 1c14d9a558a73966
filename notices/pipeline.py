"""Scrape pipeline: render, extract, then deduplicate/enrich/persist each candidate.

Render and extraction failures end the run with ``ScrapeError``. Anything that
goes wrong while handling a single candidate is logged, recorded as a failed
``ItemOutcome`` and the run moves on to the next candidate. Candidates are
handled one at a time in extraction order.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol, Tuple

from notices.errors import PersistenceError, ScrapeError
from notices.extractors.strategies import AllElementsStrategy, ExtractionStrategy, get_strategy
from notices.models.domain import ItemOutcome, ItemStatus, NotificationRecord, RawItem, ScrapeResult
from notices.render.browser import PlaywrightRenderer, Renderer
from notices.services.classifier import categorize
from notices.services.deduplicator import Deduplicator, NoticeStore
from notices.services.metadata import compute_metadata
from notices.settings import DEFAULT_TARGET_URL, Settings
from notices.utils.logging import get_logger

logger = get_logger(__name__)


class NoticeSummarizer(Protocol):
    def summarize(self, content: str, title: str, *, timeout_seconds: Optional[float] = None) -> str: ...  # noqa: D401


class Deadline:
    """Overall time budget for one run; ``None`` means unbounded."""

    def __init__(self, seconds: Optional[float], clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0


class ScrapePipeline:
    def __init__(
        self,
        renderer: Renderer,
        store: NoticeStore,
        summarizer: NoticeSummarizer,
        *,
        strategy: Optional[ExtractionStrategy] = None,
        default_url: str = DEFAULT_TARGET_URL,
        deadline_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._renderer = renderer
        self._store = store
        self._summarizer = summarizer
        self._strategy = strategy or AllElementsStrategy()
        self._default_url = default_url
        self._deadline_seconds = deadline_seconds
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        store: NoticeStore,
        summarizer: NoticeSummarizer,
        renderer: Optional[Renderer] = None,
    ) -> "ScrapePipeline":
        return cls(
            renderer or PlaywrightRenderer.from_settings(settings),
            store,
            summarizer,
            strategy=get_strategy(settings),
            default_url=settings.default_target_url,
            deadline_seconds=settings.scrape_run_deadline_seconds,
        )

    def run(self, url: Optional[str] = None, *, trace_id: Optional[str] = None) -> ScrapeResult:
        target = url or self._default_url
        deadline = Deadline(self._deadline_seconds, clock=self._clock)
        started_at = datetime.now(timezone.utc)
        log_ctx = {"url": target, "trace_id": trace_id, "strategy": self._strategy.name}
        logger.info("scrape.start", extra=log_ctx)

        candidates = self._render_and_extract(target, deadline, log_ctx)
        logger.info("scrape.extracted", extra={**log_ctx, "candidates": len(candidates)})

        dedup = Deduplicator(self._store)
        records: List[NotificationRecord] = []
        outcomes: List[ItemOutcome] = []
        for item in candidates:
            outcome, record = self._process_item(item, dedup, deadline, log_ctx)
            outcomes.append(outcome)
            if record is not None:
                records.append(record)

        result = ScrapeResult(
            url=target,
            total_candidates=len(candidates),
            records=records,
            outcomes=outcomes,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )
        logger.info(
            "scrape.completed",
            extra={
                **log_ctx,
                "candidates": result.total_candidates,
                "new_records": result.new_records,
                "duplicates": result.duplicates,
                "failed": len(result.failures),
            },
        )
        return result

    def _render_and_extract(self, url: str, deadline: Deadline, log_ctx: dict) -> List[RawItem]:
        try:
            with self._renderer.open(url, timeout_seconds=deadline.remaining()) as doc:
                return list(self._strategy.extract(doc))
        except ScrapeError as exc:
            logger.error("scrape.failed", extra={**log_ctx, "error": str(exc)})
            raise
        except Exception as exc:
            logger.error("scrape.failed", extra={**log_ctx, "error": str(exc)})
            raise ScrapeError(f"Failed to scrape {url}: {exc}") from exc

    def _process_item(
        self,
        item: RawItem,
        dedup: Deduplicator,
        deadline: Deadline,
        log_ctx: dict,
    ) -> Tuple[ItemOutcome, Optional[NotificationRecord]]:
        try:
            if dedup.is_duplicate(item.title, item.source_url):
                logger.debug("scrape.item.duplicate", extra={**log_ctx, "title": item.title[:80]})
                return ItemOutcome(status=ItemStatus.DUPLICATE, title=item.title, source_url=item.source_url), None

            category = categorize(item.title, item.content)
            metadata = compute_metadata(item.content)
            summary = self._summarizer.summarize(item.content, item.title, timeout_seconds=deadline.remaining())
            record = NotificationRecord.create(item, summary=summary, category=category, metadata=metadata)
            saved = self._insert(record)
            dedup.admit(item.title, item.source_url)
        except Exception as exc:
            logger.warning(
                "scrape.item.failed",
                extra={**log_ctx, "title": item.title[:80], "error_type": type(exc).__name__, "error": str(exc)[:200]},
            )
            return (
                ItemOutcome(status=ItemStatus.FAILED, title=item.title, source_url=item.source_url, reason=str(exc)),
                None,
            )
        return ItemOutcome(status=ItemStatus.CREATED, title=item.title, source_url=item.source_url), saved

    def _insert(self, record: NotificationRecord) -> NotificationRecord:
        try:
            return self._store.insert(record)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(f"Notice insert failed: {exc}") from exc
