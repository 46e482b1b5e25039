"""
Scheduler loop.

One cycle runs the phases in a fixed order on a single thread:
    1. Quality reconciliation (quality-check queue)
    2. Share publishing (share queue, when enabled)
    3. Upload of the download folder
then the worker sleeps for the configured interval and starts again.

A failing phase is logged and the cycle moves on; only a cancellation
request ends the loop.
"""

import logging
import threading
from typing import Any, Callable, Optional

from vodsync.config import SyncConfig
from vodsync.db import Database
from vodsync.ingestion import (
    CatalogWriter,
    QualityReconciler,
    UploadOrchestrator,
    discover_candidates,
)
from vodsync.localization import TitleResolver
from vodsync.logger import setup_logging, log_function
from vodsync.remote import RemoteCallGuard, RetryCancelled
from vodsync.social import BaseSocialClient, SharePublisher, WeiboClient
from vodsync.storage import BaseVideoStore, create_video_store

setup_logging(logger_name="scheduler")


class SyncWorker:
    """Wires the pipeline components together and runs the scheduler loop."""

    def __init__(
        self,
        config: SyncConfig,
        db: Database,
        store: BaseVideoStore,
        social_client: Optional[BaseSocialClient] = None,
        resolver: Optional[TitleResolver] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.config = config
        self.db = db
        self.store = store
        self.cancel_event = cancel_event or threading.Event()
        self.guard = RemoteCallGuard.from_config(config, self.cancel_event)

        share_enabled = config.share_to_weibo and social_client is not None
        if config.share_to_weibo and social_client is None:
            logging.getLogger("scheduler").warning(
                "Sharing is enabled but no social client is configured, sharing disabled"
            )
        self.share_enabled = share_enabled

        self.catalog_writer = CatalogWriter(
            db,
            store,
            self.guard,
            resolver or TitleResolver.from_config(config),
            share_enabled=share_enabled,
        )
        self.uploader = UploadOrchestrator(store, self.guard, self.catalog_writer)
        self.reconciler = QualityReconciler(db, store, self.guard)
        self.publisher = (
            SharePublisher(
                db, store, self.guard, social_client, config.share_url_template
            )
            if share_enabled
            else None
        )

    def upload_phase(self) -> dict[str, int]:
        candidates = discover_candidates(
            self.config.download_folder, self.config.regex_pattern
        )
        return self.uploader.sync_folder(candidates)

    def phases(self) -> list[tuple[str, Callable[[], Any]]]:
        phases = [("quality", self.reconciler.run)]
        if self.publisher is not None:
            phases.append(("share", self.publisher.run))
        phases.append(("upload", self.upload_phase))
        return phases

    @log_function(logger_name="scheduler", log_execution_time=True)
    def run_cycle(self) -> dict[str, Any]:
        """
        Run every phase once.

        Returns:
            Phase name -> phase statistics (None for a phase that failed).

        Raises:
            RetryCancelled: If shutdown was requested during a remote call.
        """
        logger = logging.getLogger("scheduler")
        results: dict[str, Any] = {}
        for name, phase in self.phases():
            if self.cancel_event.is_set():
                break
            try:
                results[name] = phase()
            except Exception as e:
                logger.error(f"Phase {name} failed: {type(e).__name__}: {e}", exc_info=True)
                results[name] = None
        return results

    def run_forever(self) -> None:
        """Run cycles until stop() is called (or a signal sets the event)."""
        logger = logging.getLogger("scheduler")
        logger.info("=== WORKER STARTED ===")
        while not self.cancel_event.is_set():
            logger.info("Starting...")
            try:
                results = self.run_cycle()
            except RetryCancelled as e:
                logger.info(f"Cycle interrupted: {e}")
                break
            logger.info(f"Cycle results: {results}")
            logger.info("Waiting...")
            if self.cancel_event.wait(self.config.interval_seconds):
                break
        logger.info("=== WORKER STOPPED ===")

    def stop(self) -> None:
        self.cancel_event.set()


def build_worker(
    config: SyncConfig, cancel_event: Optional[threading.Event] = None
) -> SyncWorker:
    """Create a worker with the database, store and social client from config."""
    db = Database(config.database_url)
    store = create_video_store(config)
    social_client = (
        WeiboClient(config.weibo_access_token) if config.share_to_weibo else None
    )
    return SyncWorker(
        config, db, store, social_client=social_client, cancel_event=cancel_event
    )
