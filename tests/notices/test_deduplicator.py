from __future__ import annotations

from datetime import datetime, timezone

import pytest

from notices.errors import PersistenceError
from notices.models.domain import Category, NoticeMetadata, NotificationRecord, RawItem
from notices.services.deduplicator import Deduplicator, InMemoryKeyStore, InMemoryNoticeStore


def _record(title: str, url: str = "https://gov.example/n") -> NotificationRecord:
    return NotificationRecord.create(
        RawItem(title=title, content=f"{title} body", source_url=url),
        summary="summary",
        category=Category.GENERAL,
        metadata=NoticeMetadata(word_count=2, reading_time=1, importance="low"),
        now=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


def test_inmemory_keystore_basic():
    ks = InMemoryKeyStore()
    assert not ks.has(("t", "u"))
    ks.add(("t", "u"))
    assert ks.has(("t", "u"))
    assert len(ks) == 1


def test_inmemory_store_assigns_ids_and_rejects_same_identity():
    store = InMemoryNoticeStore()
    saved = store.insert(_record("Water supply notice"))

    assert saved.id
    assert store.exists("Water supply notice", "https://gov.example/n")
    with pytest.raises(PersistenceError):
        store.insert(_record("Water supply notice"))


def test_identity_is_exact_title_and_url():
    store = InMemoryNoticeStore()
    store.insert(_record("Water supply notice"))
    dedup = Deduplicator(store)

    assert dedup.is_duplicate("Water supply notice", "https://gov.example/n")
    # no normalization: whitespace, case and url all matter
    assert not dedup.is_duplicate("Water supply notice ", "https://gov.example/n")
    assert not dedup.is_duplicate("water supply notice", "https://gov.example/n")
    assert not dedup.is_duplicate("Water supply notice", "https://gov.example/other")


def test_admitted_keys_are_duplicates_within_the_run():
    class _NeverSeen:
        def exists(self, title, source_url):
            return False

        def insert(self, record):  # pragma: no cover - unused
            return record

    dedup = Deduplicator(_NeverSeen())
    assert not dedup.is_duplicate("Title here", "https://gov.example/")
    dedup.admit("Title here", "https://gov.example/")
    assert dedup.is_duplicate("Title here", "https://gov.example/")


def test_lookup_failure_is_persistence_error():
    class _Down:
        def exists(self, title, source_url):
            raise ConnectionError("store offline")

        def insert(self, record):  # pragma: no cover - unused
            return record

    with pytest.raises(PersistenceError):
        Deduplicator(_Down()).is_duplicate("t", "https://gov.example/")
