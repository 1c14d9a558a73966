from __future__ import annotations

import logging
import math
from datetime import datetime, time, timezone
from typing import Annotated, Generator

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from notices.db.session import session_scope
from notices.errors import ScrapeError
from notices.models.domain import Category, NotificationRecord
from notices.repositories.notifications import (
    category_counts,
    count_active,
    get_notification,
    list_notifications,
)
from notices.tasks.scrape import scrape_core

from .models import (
    CategoryCount,
    CategoryFilter,
    NotificationPage,
    NotificationStats,
    Pagination,
    ScrapeRequest,
    ScrapeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def session_dependency() -> Generator[Session, None, None]:
    with session_scope() as session:
        yield session


SessionDep = Annotated[Session, Depends(session_dependency)]


@router.get("", response_model=NotificationPage)
def list_notifications_route(
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category: CategoryFilter = Query("all"),
) -> NotificationPage:
    selected = None if category == "all" else Category(category)
    records, total = list_notifications(session, page=page, limit=limit, category=selected)
    skip = (page - 1) * limit
    return NotificationPage(
        notifications=records,
        pagination=Pagination(
            current=page,
            total=math.ceil(total / limit),
            has_next=skip + len(records) < total,
            has_prev=page > 1,
        ),
    )


@router.get("/stats/summary", response_model=NotificationStats)
def stats_summary_route(session: SessionDep) -> NotificationStats:
    midnight = datetime.combine(datetime.now(timezone.utc).date(), time.min, tzinfo=timezone.utc)
    return NotificationStats(
        total=count_active(session),
        today=count_active(session, since=midnight),
        categories=[CategoryCount(category=name, count=count) for name, count in category_counts(session)],
    )


@router.get("/{notification_id}", response_model=NotificationRecord)
def get_notification_route(notification_id: str, session: SessionDep) -> NotificationRecord:
    record = get_notification(session, notification_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return record


@router.post("/scrape", response_model=ScrapeResponse)
def scrape_route(payload: ScrapeRequest | None = None) -> ScrapeResponse:
    url = payload.url if payload else None
    try:
        result = scrape_core(url, task_name="manual_scrape")
    except ScrapeError as exc:
        logger.warning("api.scrape.failed", extra={"url": url, "error": str(exc)})
        raise HTTPException(status_code=502, detail=f"Error during scraping process: {exc}") from exc

    if result.total_candidates == 0:
        message = "No notifications found on the specified website"
    else:
        message = "Scraping completed successfully"
    return ScrapeResponse(
        message=message,
        scraped_count=result.total_candidates,
        new_notifications=result.new_records,
        failed_items=len(result.failures),
        notifications=result.records,
    )
