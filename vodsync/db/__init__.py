"""
Database package for the vodsync worker.

Structure:
- models.py: SQLAlchemy ORM models (CatalogEntry, EpisodeEntry, queue items)
- database.py: Database object (engine, session factory, init helpers)
- queues.py: Snapshot / enqueue / dequeue helpers for the two work queues

Database Patterns:
- Session-per-operation with Database.session() context manager
- Every logical operation commits once, so a crash never leaves half a write
"""

from .models import (
    Base,
    CatalogEntry,
    EpisodeEntry,
    QualityCheckItem,
    ShareItem,
    new_catalog_id,
)
from .database import Database, validate_database_url
from .queues import QueueSnapshot, snapshot_queue, enqueue, dequeue, is_queued

__all__ = [
    # Models
    "Base",
    "CatalogEntry",
    "EpisodeEntry",
    "QualityCheckItem",
    "ShareItem",
    "new_catalog_id",
    # Database utilities
    "Database",
    "validate_database_url",
    # Queues
    "QueueSnapshot",
    "snapshot_queue",
    "enqueue",
    "dequeue",
    "is_queued",
]
