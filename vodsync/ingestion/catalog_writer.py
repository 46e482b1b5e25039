"""
Record freshly uploaded episodes in the catalog.

After an upload the writer makes sure the title has a CatalogEntry, creates
the EpisodeEntry from the remote access URL, resolves missing localized
names, and registers the episode in the work queues.
"""

import logging
from datetime import datetime
from typing import Optional

from vodsync.db import (
    CatalogEntry,
    Database,
    EpisodeEntry,
    QualityCheckItem,
    ShareItem,
    enqueue,
)
from vodsync.ingestion.file_matcher import parse_episode_number
from vodsync.localization import TitleResolver
from vodsync.logger import setup_logging, log_function
from vodsync.remote import RemoteCallGuard
from vodsync.storage import BaseVideoStore, NotFound, decode_file_response

setup_logging(logger_name="catalog")


class CatalogWriter:
    """Creates and updates catalog records for uploaded episodes."""

    def __init__(
        self,
        db: Database,
        store: BaseVideoStore,
        guard: RemoteCallGuard,
        resolver: TitleResolver,
        share_enabled: bool = False,
    ):
        self.db = db
        self.store = store
        self.guard = guard
        self.resolver = resolver
        self.share_enabled = share_enabled

    def find_or_create_entry(self, title: str) -> str:
        """
        Return the id of the CatalogEntry for a canonical title, creating it if needed.

        The new entry is committed on its own so its id is stable before any
        episode references it.
        """
        logger = logging.getLogger("catalog")
        with self.db.session() as session:
            if session.query(CatalogEntry).filter_by(en_us=title).first() is None:
                logger.info(f"Cannot find catalog entry for {title}, creating it")
                session.add(CatalogEntry(en_us=title, updated_at=datetime.now()))
                session.commit()

        with self.db.session() as session:
            return session.query(CatalogEntry).filter_by(en_us=title).one().id

    def is_recorded(self, title: str, episode_label: str) -> bool:
        """True when the catalog already holds an EpisodeEntry for this file."""
        episode_number = parse_episode_number(episode_label)
        if episode_number is None:
            return False
        with self.db.session() as session:
            entry = session.query(CatalogEntry).filter_by(en_us=title).first()
            if entry is None:
                return False
            return session.get(EpisodeEntry, (entry.id, episode_number)) is not None

    @log_function(logger_name="catalog", log_args=True, log_execution_time=True)
    def record_upload(self, title: str, episode_label: str) -> Optional[str]:
        """
        Register an uploaded episode.

        Args:
            title: Canonical title (remote folder name).
            episode_label: Episode label as found in the file name.

        Returns:
            The catalog id the episode was recorded under, or None when the
            remote store does not report an access URL for the object yet.
        """
        logger = logging.getLogger("catalog")
        episode_number = parse_episode_number(episode_label)
        if episode_number is None:
            raise ValueError(f"Episode label {episode_label!r} is not numeric")

        catalog_id = self.find_or_create_entry(title)

        logger.info(f"Checking remote file data for {title} {episode_label}")
        stat = self.guard(
            lambda: self.store.file_stat(title, episode_label),
            decode_file_response,
            f"file stat {title}/{episode_label}",
        )
        if isinstance(stat, NotFound) or not stat.access_url:
            logger.warning(
                f"No access URL for {title} {episode_label} yet, episode not recorded"
            )
            return None

        now = datetime.now()
        with self.db.session() as session:
            entry = session.get(CatalogEntry, catalog_id)
            episode = session.get(EpisodeEntry, (catalog_id, episode_number))
            if episode is None:
                logger.info(f"Adding episode {title} {episode_label}")
                session.add(
                    EpisodeEntry(
                        catalog_id=catalog_id,
                        episode_label=episode_number,
                        file_path=stat.access_url,
                        click_count=0,
                        created_at=now,
                    )
                )
            else:
                if episode.file_path != stat.access_url:
                    logger.warning(
                        f"Episode {title} {episode_number:g} already points to "
                        f"{episode.file_path}, replacing it with {stat.access_url} "
                        f"(label {episode_label!r})"
                    )
                episode.file_path = stat.access_url

            entry.updated_at = now
            self.resolver.resolve(entry)

            enqueue(
                session, QualityCheckItem, catalog_id, title, episode_label, entry.zh_tw
            )
            if self.share_enabled:
                enqueue(session, ShareItem, catalog_id, title, episode_label, entry.zh_tw)
            session.commit()

        logger.info(f"Recorded {title} {episode_label} under {catalog_id}")
        return catalog_id
