"""
Announce new episodes once their preview thumbnail exists.

Entries whose thumbnail is not ready, or whose post fails, stay in the share
queue and are tried again on the next scheduler cycle.
"""

import logging

from vodsync.db import Database, QueueSnapshot, ShareItem, dequeue, snapshot_queue
from vodsync.logger import setup_logging, log_function
from vodsync.remote import RemoteCallGuard
from vodsync.storage import BaseVideoStore, NotFound, decode_file_response
from .base import BaseSocialClient

setup_logging(logger_name="share")


def format_episode_number(episode_label: str) -> str:
    """Render a label as a number for links ("02" -> "2", "7.5" -> "7.5")."""
    return f"{float(episode_label):g}"


def build_share_link(template: str, item: QueueSnapshot) -> str:
    return template.format(
        id=item.catalog_id, label=format_episode_number(item.episode_label)
    )


def build_share_text(item: QueueSnapshot, short_url: str) -> str:
    display_title = item.zh_tw or item.title
    return f"{display_title} - {item.episode_label} {short_url}"


class SharePublisher:
    """Drains the share queue, posting one announcement per episode."""

    def __init__(
        self,
        db: Database,
        store: BaseVideoStore,
        guard: RemoteCallGuard,
        client: BaseSocialClient,
        link_template: str,
    ):
        self.db = db
        self.store = store
        self.guard = guard
        self.client = client
        self.link_template = link_template

    def share_item(self, item: QueueSnapshot) -> bool:
        """
        Post the announcement for one queued episode if its thumbnail exists.

        Returns:
            True when the post was published and the entry removed.
        """
        logger = logging.getLogger("share")
        logger.info(f"Checking {item} for sharing")
        stat = self.guard(
            lambda: self.store.file_stat(item.title, item.episode_label),
            decode_file_response,
            f"file stat {item.title}/{item.episode_label}",
        )
        if isinstance(stat, NotFound) or not stat.video_cover:
            logger.info(f"No thumbnail for {item} yet")
            return False

        logger.info(f"Sharing {item}")
        try:
            short_url = self.client.shorten(build_share_link(self.link_template, item))
            image = self.client.fetch_image(stat.video_cover)
            if not self.client.publish(build_share_text(item, short_url), image):
                logger.warning(f"Post for {item} was not accepted, will retry")
                return False
            with self.db.session() as session:
                dequeue(session, ShareItem, item.catalog_id, item.episode_label)
                session.commit()
        except Exception as e:
            logger.error(f"Cannot share {item}: {e}")
            return False

        logger.info(f"{item} shared")
        return True

    @log_function(logger_name="share", log_execution_time=True)
    def run(self) -> dict[str, int]:
        """
        One pass over a snapshot of the share queue.

        Returns:
            {"checked": n, "shared": n, "pending": n}
        """
        logger = logging.getLogger("share")
        with self.db.session() as session:
            items = snapshot_queue(session, ShareItem)
        logger.info(f"Checking {len(items)} queued episodes for sharing")

        stats = {"checked": 0, "shared": 0, "pending": 0}
        for item in items:
            stats["checked"] += 1
            if self.share_item(item):
                stats["shared"] += 1
            else:
                stats["pending"] += 1
        logger.info(f"Checking for sharing is done: {stats}")
        return stats
