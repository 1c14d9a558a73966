from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from notices.models.domain import NotificationRecord

CategoryFilter = Literal["all", "general", "health", "education", "employment", "taxation", "legal"]


class ScrapeRequest(BaseModel):
    url: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _absolute_or_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        s = v.strip()
        if not s:
            return None
        if "://" not in s:
            raise ValueError("url must be an absolute URL.")
        return s


class ScrapeResponse(BaseModel):
    message: str
    scraped_count: int
    new_notifications: int
    failed_items: int = 0
    notifications: list[NotificationRecord] = Field(default_factory=list)


class Pagination(BaseModel):
    current: int
    total: int
    has_next: bool
    has_prev: bool


class NotificationPage(BaseModel):
    notifications: list[NotificationRecord]
    pagination: Pagination


class CategoryCount(BaseModel):
    category: str
    count: int


class NotificationStats(BaseModel):
    total: int
    today: int
    categories: list[CategoryCount]
