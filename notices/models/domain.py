"""Domain DTOs for the notice pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator


class Category(str, Enum):
    GENERAL = "general"
    HEALTH = "health"
    EDUCATION = "education"
    EMPLOYMENT = "employment"
    TAXATION = "taxation"
    LEGAL = "legal"


class Importance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ItemStatus(str, Enum):
    CREATED = "created"
    DUPLICATE = "duplicate"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def source_domain_of(url: str) -> str:
    """Host component of an absolute URL; empty for host-less schemes such as file:."""
    return urlparse(url).hostname or ""


class RawItem(BaseModel):
    """Candidate notice harvested from a rendered page."""

    model_config = {"frozen": True}

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    source_url: str

    @field_validator("source_url")
    @classmethod
    def _absolute(cls, v: str) -> str:
        if not urlparse(v).scheme:
            raise ValueError("source_url must be absolute.")
        return v

    @property
    def identity(self) -> tuple[str, str]:
        return (self.title, self.source_url)


class NoticeMetadata(BaseModel):
    model_config = {"frozen": True}

    word_count: int = Field(..., ge=0)
    reading_time: int = Field(..., ge=1, description="Estimated reading time in minutes")
    importance: Importance


class NotificationRecord(BaseModel):
    """Finalized notice, owned by the store after insertion."""

    model_config = {"frozen": True, "from_attributes": True}

    id: Optional[str] = None
    title: str
    content: str
    summary: str
    source_url: str
    source_domain: str
    category: Category = Category.GENERAL
    published_date: datetime
    scraped_at: datetime
    is_active: bool = True
    metadata: NoticeMetadata

    @classmethod
    def create(
        cls,
        item: RawItem,
        *,
        summary: str,
        category: Category,
        metadata: NoticeMetadata,
        now: Optional[datetime] = None,
    ) -> "NotificationRecord":
        created = now or _utcnow()
        return cls(
            title=item.title,
            content=item.content,
            summary=summary,
            source_url=item.source_url,
            source_domain=source_domain_of(item.source_url),
            category=category,
            published_date=created,
            scraped_at=created,
            metadata=metadata,
        )


class ItemOutcome(BaseModel):
    """Per-item result: created, skipped as duplicate, or failed with a reason."""

    status: ItemStatus
    title: str
    source_url: str
    reason: Optional[str] = None


class ScrapeResult(BaseModel):
    url: str
    total_candidates: int = Field(..., ge=0)
    records: List[NotificationRecord] = Field(default_factory=list)
    outcomes: List[ItemOutcome] = Field(default_factory=list)
    started_at: datetime
    finished_at: datetime

    @property
    def new_records(self) -> int:
        return len(self.records)

    @property
    def failures(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if o.status == ItemStatus.FAILED]

    @property
    def duplicates(self) -> int:
        return sum(1 for o in self.outcomes if o.status == ItemStatus.DUPLICATE)
