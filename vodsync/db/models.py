"""
SQLAlchemy ORM models for the video catalog.

This module defines the database schema using SQLAlchemy's declarative base.

Models:
    CatalogEntry: One row per title, keyed by its canonical (source-language) name
    EpisodeEntry: One row per (title, episode label) with playback and tier links
    QualityCheckItem: Queue of episodes still waiting for transcoded tiers
    ShareItem: Queue of episodes still waiting for a social announcement
"""

import uuid_utils as uuid
from sqlalchemy import (
    Column,
    Integer,
    Float,
    String,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def new_catalog_id() -> str:
    """Generate a time-ordered identifier for a new catalog entry (UUID7)."""
    return str(uuid.uuid7())


class CatalogEntry(Base):
    """
    A title in the catalog.

    Attributes:
        id: Primary key (UUID7), assigned once on creation and never reused
        en_us: Canonical title extracted from the file name (unique natural key)
        ja_jp: Localized name from the first lookup source
        zh_tw: Localized name from the second lookup source
        ru_ru: Localized name from the third lookup source
        updated_at: Last time an episode was added or names were resolved
    """

    __tablename__ = "catalog_entries"

    id = Column(String, primary_key=True, default=new_catalog_id)
    en_us = Column(String, nullable=False, unique=True)
    ja_jp = Column(String, nullable=True)
    zh_tw = Column(String, nullable=True)
    ru_ru = Column(String, nullable=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<CatalogEntry(id={self.id}, en_us='{self.en_us}')>"


class EpisodeEntry(Base):
    """
    An uploaded episode of a catalog title.

    Tier links are filled in progressively by the quality reconciler as the
    remote transcoder finishes each variant.

    Attributes:
        catalog_id: Owning CatalogEntry id
        episode_label: Numeric episode label ("02" is stored as 2.0)
        file_path: Remote access URL of the uploaded source file
        low_quality / medium_quality / high_quality / original_quality: Tier URLs
        file_thumb: Preview thumbnail URL
        click_count: View counter
        created_at: Timestamp of first registration
    """

    __tablename__ = "episode_entries"

    catalog_id = Column(
        String, ForeignKey("catalog_entries.id"), primary_key=True, nullable=False
    )
    episode_label = Column(Float, primary_key=True, nullable=False)
    file_path = Column(String, nullable=False)

    low_quality = Column(String, nullable=True)
    medium_quality = Column(String, nullable=True)
    high_quality = Column(String, nullable=True)
    original_quality = Column(String, nullable=True)
    file_thumb = Column(String, nullable=True)

    click_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def __repr__(self):
        return (
            f"<EpisodeEntry(catalog_id={self.catalog_id}, "
            f"episode_label={self.episode_label:g})>"
        )


class QueueMixin:
    """
    Columns shared by both work queues.

    (catalog_id, episode_label) is the primary key, so an episode can sit in
    a given queue at most once. The label is kept exactly as it appeared in
    the file name since it is also the remote object name.
    """

    catalog_id = Column(String, primary_key=True, nullable=False)
    episode_label = Column(String, primary_key=True, nullable=False)
    title = Column(String, nullable=False)
    zh_tw = Column(String, nullable=True)

    def __repr__(self):
        return (
            f"<{type(self).__name__}(catalog_id={self.catalog_id}, "
            f"title='{self.title}', episode_label='{self.episode_label}')>"
        )


class QualityCheckItem(QueueMixin, Base):
    """Episode waiting for its thumbnail and quality tiers."""

    __tablename__ = "quality_check_queue"


class ShareItem(QueueMixin, Base):
    """Episode waiting to be announced on the social network."""

    __tablename__ = "share_queue"
