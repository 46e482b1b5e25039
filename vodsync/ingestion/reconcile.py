"""
Quality reconciliation.

Pulls transcoding results (thumbnail and quality tiers) from the remote
store into EpisodeEntry rows for every episode in the quality-check queue.
Each cycle makes one attempt per queued episode; an episode leaves the queue
once its record is considered complete.
"""

import logging
from typing import Any

from vodsync.db import (
    Database,
    EpisodeEntry,
    QualityCheckItem,
    QueueSnapshot,
    dequeue,
    snapshot_queue,
)
from vodsync.ingestion.file_matcher import parse_episode_number
from vodsync.logger import setup_logging, log_with_timer
from vodsync.remote import RemoteCallGuard
from vodsync.storage import BaseVideoStore, FileStat, NotFound, decode_file_response

setup_logging(logger_name="quality")

# EpisodeEntry column -> how to read it from a FileStat
REMOTE_FIELDS = (
    ("file_thumb", lambda stat: stat.video_cover),
    ("low_quality", lambda stat: stat.play_urls.low),
    ("medium_quality", lambda stat: stat.play_urls.medium),
    ("high_quality", lambda stat: stat.play_urls.high),
    ("original_quality", lambda stat: stat.play_urls.original),
)


def apply_remote_stat(episode: EpisodeEntry, stat: FileStat) -> list[str]:
    """
    Copy remote links into empty fields of `episode`.

    Fields that already hold a value are never overwritten.

    Returns:
        Names of the fields that were filled.
    """
    filled = []
    for column, read in REMOTE_FIELDS:
        remote_value = read(stat)
        if not getattr(episode, column) and remote_value:
            setattr(episode, column, remote_value)
            filled.append(column)
    return filled


def is_quality_complete(episode: Any) -> bool:
    """
    Completion predicate for the quality-check queue.

    Thumbnail, low, medium and high must be present while the original tier
    is still empty. Episodes whose original tier was published are kept in
    the queue.
    """
    return bool(
        episode.file_thumb
        and episode.low_quality
        and episode.medium_quality
        and episode.high_quality
        and not episode.original_quality
    )


class QualityReconciler:
    """Drains the quality-check queue one attempt per entry per cycle."""

    def __init__(self, db: Database, store: BaseVideoStore, guard: RemoteCallGuard):
        self.db = db
        self.store = store
        self.guard = guard

    def check_item(self, item: QueueSnapshot) -> bool:
        """
        Reconcile one queued episode.

        Returns:
            True when the episode is complete and was removed from the queue.
        """
        logger = logging.getLogger("quality")
        logger.info(f"Checking quality for {item}")

        episode_number = parse_episode_number(item.episode_label)
        if episode_number is None:
            logger.warning(f"Queued episode {item} has a non-numeric label, skipping")
            return False

        stat = self.guard(
            lambda: self.store.file_stat(item.title, item.episode_label),
            decode_file_response,
            f"file stat {item.title}/{item.episode_label}",
        )
        if isinstance(stat, NotFound):
            logger.warning(f"Remote object for {item} not found, keeping it queued")
            return False

        with self.db.session() as session:
            episode = session.get(EpisodeEntry, (item.catalog_id, episode_number))
            if episode is None:
                logger.warning(f"No episode record for {item}, keeping it queued")
                return False

            for column in apply_remote_stat(episode, stat):
                logger.info(f"Add {column} for {item}")

            complete = is_quality_complete(episode)
            if complete:
                dequeue(session, QualityCheckItem, item.catalog_id, item.episode_label)
            session.commit()

        if complete:
            logger.info(f"{item} quality is done, removed from queue")
        return complete

    @log_with_timer("quality")
    def run(self) -> dict[str, int]:
        """
        One pass over a snapshot of the quality-check queue.

        Returns:
            {"checked": n, "completed": n, "pending": n}
        """
        logger = logging.getLogger("quality")
        with self.db.session() as session:
            items = snapshot_queue(session, QualityCheckItem)
        logger.info(f"Checking quality for {len(items)} queued episodes")

        stats = {"checked": 0, "completed": 0, "pending": 0}
        for item in items:
            stats["checked"] += 1
            if self.check_item(item):
                stats["completed"] += 1
            else:
                stats["pending"] += 1
        logger.info(f"Checking for quality is done: {stats}")
        return stats
