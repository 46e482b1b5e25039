"""create catalog, episode and queue tables

Revision ID: 3f1c9a7d2b64
Revises:
Create Date: 2026-10-19 09:12:31.402215

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b64"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _queue_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column("catalog_id", sa.String(), nullable=False),
        sa.Column("episode_label", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("zh_tw", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("catalog_id", "episode_label"),
    )


def upgrade() -> None:
    """Create the catalog, episode and both work-queue tables."""
    op.create_table(
        "catalog_entries",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("en_us", sa.String(), nullable=False),
        sa.Column("ja_jp", sa.String(), nullable=True),
        sa.Column("zh_tw", sa.String(), nullable=True),
        sa.Column("ru_ru", sa.String(), nullable=True),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("en_us"),
    )
    op.create_table(
        "episode_entries",
        sa.Column("catalog_id", sa.String(), nullable=False),
        sa.Column("episode_label", sa.Float(), nullable=False),
        sa.Column("file_path", sa.String(), nullable=False),
        sa.Column("low_quality", sa.String(), nullable=True),
        sa.Column("medium_quality", sa.String(), nullable=True),
        sa.Column("high_quality", sa.String(), nullable=True),
        sa.Column("original_quality", sa.String(), nullable=True),
        sa.Column("file_thumb", sa.String(), nullable=True),
        sa.Column("click_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.ForeignKeyConstraint(["catalog_id"], ["catalog_entries.id"]),
        sa.PrimaryKeyConstraint("catalog_id", "episode_label"),
    )
    _queue_table("quality_check_queue")
    _queue_table("share_queue")


def downgrade() -> None:
    """Drop all catalog tables."""
    op.drop_table("share_queue")
    op.drop_table("quality_check_queue")
    op.drop_table("episode_entries")
    op.drop_table("catalog_entries")
