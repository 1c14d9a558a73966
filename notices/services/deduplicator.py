"""Duplicate detection against the notice store.

Identity is the exact ``(title, source_url)`` pair. No case or whitespace
normalization is applied, so titles that differ only by trailing whitespace
are treated as distinct notices.
"""

from __future__ import annotations

import uuid
from typing import Dict, Protocol, Tuple

from notices.errors import PersistenceError
from notices.models.domain import NotificationRecord

IdentityKey = Tuple[str, str]


class NoticeStore(Protocol):
    def exists(self, title: str, source_url: str) -> bool: ...  # noqa: D401
    def insert(self, record: NotificationRecord) -> NotificationRecord: ...  # noqa: D401


class KeyStore(Protocol):
    def has(self, key: IdentityKey) -> bool: ...  # noqa: D401
    def add(self, key: IdentityKey) -> None: ...  # noqa: D401


class InMemoryKeyStore:
    """Key set scoped to one scrape run."""

    def __init__(self) -> None:
        self._set: set[IdentityKey] = set()

    def has(self, key: IdentityKey) -> bool:
        return key in self._set

    def add(self, key: IdentityKey) -> None:
        self._set.add(key)

    def __len__(self) -> int:
        return len(self._set)


class InMemoryNoticeStore:
    """Dict-backed store for tests/local runs."""

    def __init__(self) -> None:
        self._records: Dict[IdentityKey, NotificationRecord] = {}

    def exists(self, title: str, source_url: str) -> bool:
        return (title, source_url) in self._records

    def insert(self, record: NotificationRecord) -> NotificationRecord:
        key = (record.title, record.source_url)
        if key in self._records:
            raise PersistenceError(f"Duplicate identity key: {key!r}")
        saved = record.model_copy(update={"id": str(uuid.uuid4())})
        self._records[key] = saved
        return saved

    def all(self) -> list[NotificationRecord]:
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


class Deduplicator:
    """Checks candidates against keys admitted earlier in this run, then the store."""

    def __init__(self, store: NoticeStore, keystore: KeyStore | None = None) -> None:
        self._store = store
        self._seen = keystore if keystore is not None else InMemoryKeyStore()

    def is_duplicate(self, title: str, source_url: str) -> bool:
        if self._seen.has((title, source_url)):
            return True
        try:
            return self._store.exists(title, source_url)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(f"Duplicate lookup failed: {exc}") from exc

    def admit(self, title: str, source_url: str) -> None:
        """Mark an identity key as taken for the remainder of the run."""
        self._seen.add((title, source_url))
