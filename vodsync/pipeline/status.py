"""Queue status report (what the worker still has to do)."""

from collections import deque
from pathlib import Path
from typing import Optional

from vodsync.db import Database, QualityCheckItem, ShareItem, snapshot_queue


def queue_status(db: Database) -> dict[str, list]:
    """Snapshot of both work queues."""
    with db.session() as session:
        return {
            "quality_check": snapshot_queue(session, QualityCheckItem),
            "share": snapshot_queue(session, ShareItem),
        }


def last_log_line(log_file: str) -> Optional[str]:
    """Last non-empty line of a log file, None if the file is missing or empty."""
    path = Path(log_file)
    if not path.is_file():
        return None
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        tail = deque((line.rstrip("\n") for line in f if line.strip()), maxlen=1)
    return tail[0] if tail else None
