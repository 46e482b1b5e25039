"""
Scheduler for the vodsync worker.

Each cycle runs, in order:
    1. Quality reconciliation (vodsync.ingestion.reconcile)
    2. Share publishing (vodsync.social.publisher), when enabled
    3. Upload of new local files (vodsync.ingestion.upload)
then sleeps for SYNC_INTERVAL_SECONDS.

Usage:
    python -m vodsync            # run forever
    python -m vodsync --once     # run a single cycle
    python -m vodsync --status   # show queued work
"""

from .orchestrator import SyncWorker, build_worker
from .status import queue_status, last_log_line

__all__ = [
    "SyncWorker",
    "build_worker",
    "queue_status",
    "last_log_line",
]
