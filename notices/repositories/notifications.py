"""Repositories for persisting notices and scrape job runs."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, ContextManager, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notices.db.models import JobRun, JobStatus, Notification
from notices.db.session import session_scope
from notices.errors import PersistenceError
from notices.models.domain import Category, NoticeMetadata, NotificationRecord, ScrapeResult

SessionFactory = Callable[[], ContextManager[Session]]


def to_record(entity: Notification) -> NotificationRecord:
    return NotificationRecord(
        id=str(entity.id),
        title=entity.title,
        content=entity.content,
        summary=entity.summary,
        source_url=entity.source_url,
        source_domain=entity.source_domain,
        category=entity.category,
        published_date=entity.published_date,
        scraped_at=entity.scraped_at,
        is_active=entity.is_active,
        metadata=NoticeMetadata(
            word_count=entity.word_count,
            reading_time=entity.reading_time,
            importance=entity.importance,
        ),
    )


class SqlNoticeStore:
    """NoticeStore backed by SQLAlchemy; each call runs in its own transaction."""

    def __init__(self, session_factory: SessionFactory = session_scope) -> None:
        self._session_factory = session_factory

    def exists(self, title: str, source_url: str) -> bool:
        stmt = (
            select(Notification.id)
            .where(Notification.title == title, Notification.source_url == source_url)
            .limit(1)
        )
        try:
            with self._session_factory() as session:
                return session.execute(stmt).first() is not None
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Notice lookup failed: {exc}") from exc

    def insert(self, record: NotificationRecord) -> NotificationRecord:
        entity = Notification(
            title=record.title,
            content=record.content,
            summary=record.summary,
            source_url=record.source_url,
            source_domain=record.source_domain,
            category=record.category,
            published_date=record.published_date,
            scraped_at=record.scraped_at,
            is_active=record.is_active,
            word_count=record.metadata.word_count,
            reading_time=record.metadata.reading_time,
            importance=record.metadata.importance,
        )
        try:
            with self._session_factory() as session:
                session.add(entity)
                session.flush()
                return record.model_copy(update={"id": str(entity.id)})
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Notice insert failed: {exc}") from exc


def list_notifications(
    session: Session,
    *,
    page: int = 1,
    limit: int = 20,
    category: Optional[Category] = None,
) -> Tuple[List[NotificationRecord], int]:
    """Active notices, newest published first, with the total match count."""
    conditions = [Notification.is_active.is_(True)]
    if category is not None:
        conditions.append(Notification.category == category)
    total = session.execute(select(func.count()).select_from(Notification).where(*conditions)).scalar_one()
    stmt = (
        select(Notification)
        .where(*conditions)
        .order_by(Notification.published_date.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = session.execute(stmt).scalars().all()
    return [to_record(row) for row in rows], int(total)


def get_notification(session: Session, notification_id: str) -> Optional[NotificationRecord]:
    try:
        key = uuid.UUID(notification_id)
    except ValueError:
        return None
    entity = session.get(Notification, key)
    return to_record(entity) if entity is not None else None


def category_counts(session: Session) -> List[Tuple[str, int]]:
    count = func.count(Notification.id)
    stmt = (
        select(Notification.category, count)
        .where(Notification.is_active.is_(True))
        .group_by(Notification.category)
        .order_by(count.desc())
    )
    return [(Category(row[0]).value, int(row[1])) for row in session.execute(stmt)]


def count_active(session: Session, *, since: Optional[datetime] = None) -> int:
    stmt = select(func.count()).select_from(Notification).where(Notification.is_active.is_(True))
    if since is not None:
        stmt = stmt.where(Notification.created_at >= since)
    return int(session.execute(stmt).scalar_one())


def save_records(session: Session, records: Sequence[NotificationRecord]) -> int:
    """Bulk insert helper for seeding and tests."""
    for record in records:
        session.add(
            Notification(
                title=record.title,
                content=record.content,
                summary=record.summary,
                source_url=record.source_url,
                source_domain=record.source_domain,
                category=record.category,
                published_date=record.published_date,
                scraped_at=record.scraped_at,
                is_active=record.is_active,
                word_count=record.metadata.word_count,
                reading_time=record.metadata.reading_time,
                importance=record.metadata.importance,
            )
        )
    return len(records)


class JobRunRecorder:
    """Context manager to record the lifecycle of one scrape run."""

    def __init__(
        self,
        *,
        source_url: str,
        task_name: str,
        trace_id: str | None = None,
        session_factory: SessionFactory = session_scope,
    ) -> None:
        self._session_factory = session_factory
        self._result: ScrapeResult | None = None
        self._job = JobRun(
            status=JobStatus.RUNNING,
            source_url=source_url,
            task_name=task_name,
            trace_id=trace_id,
            started_at=datetime.now(timezone.utc),
        )

    def record(self, result: ScrapeResult) -> None:
        self._result = result

    def __enter__(self) -> "JobRunRecorder":
        # durable RUNNING row even if the run later fails
        with self._session_factory() as session:
            session.add(self._job)
        return self

    @property
    def job_id(self) -> uuid.UUID:
        return self._job.id

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        job = self._job
        if exc is None:
            job.status = JobStatus.SUCCEEDED
        else:
            job.status = JobStatus.FAILED
            job.error_message = str(exc)[:512]
        if self._result is not None:
            job.total_candidates = self._result.total_candidates
            job.new_records = self._result.new_records
            job.failed_items = len(self._result.failures)
        job.finished_at = datetime.now(timezone.utc)
        try:
            with self._session_factory() as session:
                session.merge(job)
        except SQLAlchemyError:  # pragma: no cover - do not mask the original error
            if exc is None:
                raise
