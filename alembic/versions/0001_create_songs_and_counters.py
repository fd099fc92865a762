"""create_songs_and_counters

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "songs",
        sa.Column("song", sa.Text(), nullable=False),
        sa.Column("artist", sa.Text(), nullable=False, server_default=""),
        sa.Column("writer", sa.Text(), nullable=False, server_default=""),
        sa.Column("album", sa.Text(), nullable=False, server_default=""),
        sa.Column("year", sa.Text(), nullable=False, server_default=""),
        sa.Column("rating", sa.Integer(), nullable=False, server_default=sa.text("1000")),
        sa.PrimaryKeyConstraint("song"),
    )

    op.create_table(
        "counters",
        sa.Column("key", sa.String(length=50), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("key"),
    )

    op.execute("INSERT INTO counters (key, count) VALUES ('votes', 0)")


def downgrade() -> None:
    op.drop_table("counters")
    op.drop_table("songs")
