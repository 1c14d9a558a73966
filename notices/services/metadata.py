"""Length-derived notice metadata."""

from __future__ import annotations

import math

from notices.models.domain import Importance, NoticeMetadata

WORDS_PER_MINUTE = 200
HIGH_IMPORTANCE_WORDS = 500
MEDIUM_IMPORTANCE_WORDS = 200


def word_count(content: str) -> int:
    return len(content.split())


def reading_time(words: int) -> int:
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def importance_for(words: int) -> Importance:
    if words > HIGH_IMPORTANCE_WORDS:
        return Importance.HIGH
    if words > MEDIUM_IMPORTANCE_WORDS:
        return Importance.MEDIUM
    return Importance.LOW


def compute_metadata(content: str) -> NoticeMetadata:
    words = word_count(content)
    return NoticeMetadata(
        word_count=words,
        reading_time=reading_time(words),
        importance=importance_for(words),
    )
