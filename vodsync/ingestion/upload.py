"""
Upload local episodes to the remote video store.

For every candidate file the orchestrator makes sure the title folder
exists, uploads the episode if the remote object is missing, and re-uploads
it when the remote length disagrees with the local file (an interrupted or
corrupted earlier upload). A remote copy that is current but missing from the
catalog (a failed or interrupted catalog write) is recorded again. An
unchanged folder costs existence checks and a catalog lookup only.
"""

import logging
from typing import Iterable

from vodsync.ingestion.catalog_writer import CatalogWriter
from vodsync.ingestion.file_matcher import LocalFileCandidate, parse_episode_number
from vodsync.logger import setup_logging, log_function
from vodsync.remote import RemoteCallGuard
from vodsync.storage import (
    BaseVideoStore,
    NotFound,
    decode_ack,
    decode_file_response,
    decode_folder_response,
)

setup_logging(logger_name="upload")

UPLOADED = "uploaded"
REUPLOADED = "reuploaded"
UNCHANGED = "unchanged"
RECORDED = "recorded"
SKIPPED = "skipped"
FAILED = "failed"


class UploadOrchestrator:
    """Idempotent upload of local candidates to the video store."""

    def __init__(
        self,
        store: BaseVideoStore,
        guard: RemoteCallGuard,
        catalog_writer: CatalogWriter,
    ):
        self.store = store
        self.guard = guard
        self.catalog_writer = catalog_writer

    def ensure_folder(self, title: str) -> None:
        logger = logging.getLogger("upload")
        folder = self.guard(
            lambda: self.store.folder_stat(title),
            decode_folder_response,
            f"folder stat {title}",
        )
        if isinstance(folder, NotFound):
            logger.info(f"Creating {title} folder")
            ack = self.guard(
                lambda: self.store.create_folder(title),
                decode_ack,
                f"create folder {title}",
            )
            if not ack.ok:
                logger.warning(f"Create folder {title} answered {ack.code}: {ack.message}")

    def upload(self, candidate: LocalFileCandidate) -> bool:
        ack = self.guard(
            lambda: self.store.upload_file(
                candidate.title, candidate.episode_label, str(candidate.path)
            ),
            decode_ack,
            f"upload {candidate}",
        )
        if not ack.ok:
            logging.getLogger("upload").error(
                f"Upload of {candidate} rejected ({ack.code}: {ack.message})"
            )
        return ack.ok

    def process_candidate(self, candidate: LocalFileCandidate) -> str:
        """
        Bring the remote copy of one local file up to date.

        Returns:
            One of "uploaded", "reuploaded", "recorded", "unchanged", "skipped",
            "failed".
        """
        logger = logging.getLogger("upload")
        title, episode_label = candidate.title, candidate.episode_label
        logger.info(f"Detecting file {title} {episode_label}")

        if parse_episode_number(episode_label) is None:
            logger.warning(f"Skipping {candidate.path.name}: episode label is not numeric")
            return SKIPPED

        self.ensure_folder(title)

        stat = self.guard(
            lambda: self.store.file_stat(title, episode_label),
            decode_file_response,
            f"file stat {title}/{episode_label}",
        )

        if isinstance(stat, NotFound):
            logger.info(f"Uploading {title} {episode_label}...")
            if not self.upload(candidate):
                return FAILED
            self.catalog_writer.record_upload(title, episode_label)
            logger.info(f"Upload {title} {episode_label} complete")
            return UPLOADED

        local_size = candidate.size
        if stat.filelen != local_size:
            logger.warning(
                f"File {title} {episode_label} is {stat.filelen} bytes remotely and "
                f"{local_size} bytes locally, reuploading"
            )
            self.guard(
                lambda: self.store.delete_file(title, episode_label),
                decode_ack,
                f"delete {title}/{episode_label}",
            )
            if not self.upload(candidate):
                return FAILED
            if not self.catalog_writer.is_recorded(title, episode_label):
                self.catalog_writer.record_upload(title, episode_label)
            logger.info(f"Reupload {title} {episode_label} complete")
            return REUPLOADED

        # An earlier cycle may have uploaded the file but failed to record it
        if not self.catalog_writer.is_recorded(title, episode_label):
            logger.info(
                f"File {title} {episode_label} is uploaded but not in the catalog, recording it"
            )
            self.catalog_writer.record_upload(title, episode_label)
            return RECORDED

        return UNCHANGED

    @log_function(logger_name="upload", log_execution_time=True)
    def sync_folder(self, candidates: Iterable[LocalFileCandidate]) -> dict[str, int]:
        """
        Process every candidate; one failing file does not stop the others.

        Returns:
            Count of candidates per outcome.
        """
        logger = logging.getLogger("upload")
        stats = {
            UPLOADED: 0,
            REUPLOADED: 0,
            UNCHANGED: 0,
            RECORDED: 0,
            SKIPPED: 0,
            FAILED: 0,
        }
        for candidate in candidates:
            try:
                outcome = self.process_candidate(candidate)
            except Exception as e:
                logger.error(f"Failed to process {candidate}: {e}", exc_info=True)
                outcome = FAILED
            stats[outcome] += 1
            logger.info(f"File {candidate} {outcome}")
        return stats
