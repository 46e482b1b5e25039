"""Tests for quality reconciliation."""

from __future__ import annotations

import pytest

from vodsync.db import EpisodeEntry, QualityCheckItem, enqueue
from vodsync.ingestion import CatalogWriter, QualityReconciler
from vodsync.ingestion.reconcile import is_quality_complete

ALL_TIERS = {
    "f10": "https://cdn/Show/02_f10.mp4",
    "f20": "https://cdn/Show/02_f20.mp4",
    "f30": "https://cdn/Show/02_f30.mp4",
}


@pytest.fixture
def recorded(db, store, guard, resolver) -> str:
    """Show 02 uploaded and waiting in the quality-check queue."""
    store.put("Show", "02", filelen=1000)
    return CatalogWriter(db, store, guard, resolver).record_upload("Show", "02")


@pytest.fixture
def reconciler(db, store, guard) -> QualityReconciler:
    return QualityReconciler(db, store, guard)


def episode(db, catalog_id: str) -> EpisodeEntry:
    with db.session() as session:
        return session.get(EpisodeEntry, (catalog_id, 2.0))


def queued(db) -> int:
    with db.session() as session:
        return session.query(QualityCheckItem).count()


class TestQualityReconciler:
    def test_partial_then_complete(self, db, store, recorded, reconciler) -> None:
        store.put("Show", "02", filelen=1000, play_urls={"f10": ALL_TIERS["f10"]})

        stats = reconciler.run()

        assert stats == {"checked": 1, "completed": 0, "pending": 1}
        assert episode(db, recorded).low_quality == ALL_TIERS["f10"]
        assert queued(db) == 1

        store.put(
            "Show", "02", filelen=1000, video_cover="https://cdn/Show/02.jpg", play_urls=ALL_TIERS
        )

        stats = reconciler.run()

        assert stats["completed"] == 1
        stored = episode(db, recorded)
        assert stored.file_thumb == "https://cdn/Show/02.jpg"
        assert stored.medium_quality == ALL_TIERS["f20"]
        assert stored.high_quality == ALL_TIERS["f30"]
        assert queued(db) == 0

    def test_populated_fields_are_not_overwritten(
        self, db, store, recorded, reconciler
    ) -> None:
        with db.session() as session:
            session.get(EpisodeEntry, (recorded, 2.0)).low_quality = "https://mirror/low.mp4"
            session.commit()
        store.put("Show", "02", filelen=1000, play_urls=ALL_TIERS)

        reconciler.run()

        assert episode(db, recorded).low_quality == "https://mirror/low.mp4"

    def test_published_original_keeps_entry_queued(
        self, db, store, recorded, reconciler
    ) -> None:
        store.put(
            "Show",
            "02",
            filelen=1000,
            video_cover="https://cdn/Show/02.jpg",
            play_urls={**ALL_TIERS, "f0": "https://cdn/Show/02_f0.mp4"},
        )

        stats = reconciler.run()

        assert stats["completed"] == 0
        assert episode(db, recorded).original_quality == "https://cdn/Show/02_f0.mp4"
        assert queued(db) == 1

    def test_missing_remote_object_stays_queued(
        self, db, store, recorded, reconciler
    ) -> None:
        store.objects.clear()
        assert reconciler.run() == {"checked": 1, "completed": 0, "pending": 1}
        assert queued(db) == 1

    def test_queue_row_without_episode_stays_queued(self, db, store, reconciler) -> None:
        store.put("Ghost", "01", filelen=1, video_cover="c", play_urls=ALL_TIERS)
        with db.session() as session:
            enqueue(session, QualityCheckItem, "missing-id", "Ghost", "01")
            session.commit()

        assert reconciler.run()["pending"] == 1
        assert queued(db) == 1

    def test_empty_queue(self, reconciler, store) -> None:
        assert reconciler.run() == {"checked": 0, "completed": 0, "pending": 0}
        assert store.calls == []


class TestIsQualityComplete:
    def test_predicate(self) -> None:
        base = dict(
            file_thumb="t", low_quality="l", medium_quality="m", high_quality="h"
        )
        assert is_quality_complete(EpisodeEntry(**base))
        assert not is_quality_complete(EpisodeEntry(**{**base, "file_thumb": None}))
        assert not is_quality_complete(EpisodeEntry(**base, original_quality="o"))
