"""
Work-queue helpers for the quality-check and share queues.

Phases never iterate a live query while deleting from it: they take a
snapshot of plain tuples first, then remove processed items by key.
"""

from typing import NamedTuple, Optional, Type, Union

from sqlalchemy.orm import Session

from .models import QualityCheckItem, ShareItem

QueueModel = Type[Union[QualityCheckItem, ShareItem]]


class QueueSnapshot(NamedTuple):
    """Detached copy of one queue row."""

    catalog_id: str
    title: str
    episode_label: str
    zh_tw: Optional[str]

    def __str__(self) -> str:
        return f"{self.title} {self.episode_label}"


def snapshot_queue(session: Session, model: QueueModel) -> list[QueueSnapshot]:
    """Return every row of a queue as detached tuples (stable iteration)."""
    rows = session.query(model).order_by(model.title, model.episode_label).all()
    return [
        QueueSnapshot(row.catalog_id, row.title, row.episode_label, row.zh_tw)
        for row in rows
    ]


def is_queued(
    session: Session, model: QueueModel, catalog_id: str, episode_label: str
) -> bool:
    return (
        session.query(model)
        .filter_by(catalog_id=catalog_id, episode_label=episode_label)
        .first()
        is not None
    )


def enqueue(
    session: Session,
    model: QueueModel,
    catalog_id: str,
    title: str,
    episode_label: str,
    zh_tw: Optional[str] = None,
) -> bool:
    """
    Add an episode to a queue unless it is already there.

    The caller commits. Returns True when a row was added.
    """
    if is_queued(session, model, catalog_id, episode_label):
        return False
    session.add(
        model(
            catalog_id=catalog_id,
            title=title,
            episode_label=episode_label,
            zh_tw=zh_tw,
        )
    )
    session.flush()
    return True


def dequeue(
    session: Session, model: QueueModel, catalog_id: str, episode_label: str
) -> bool:
    """Remove an episode from a queue by key. Returns True if a row was deleted."""
    deleted = (
        session.query(model)
        .filter_by(catalog_id=catalog_id, episode_label=episode_label)
        .delete(synchronize_session=False)
    )
    return deleted > 0
