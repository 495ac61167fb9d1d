"""Create singers and instruments tables

Revision ID: 001
Revises: None
Create Date: 2024-03-02 00:00:00.000000+00:00

What:  Creates `singers` (both data models share it) and `instruments`
       (band members joined into relational singers by artist_id).
Note:  instruments.artist_id has no foreign key; deleting a singer does not
       cascade.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "singers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("artistname", sa.String(255), nullable=False),
        # Embedded model: list of {singer_name, instruments}
        sa.Column("band_members", sa.JSON(), nullable=True),
        # Relational model: public integer id (1-1000)
        sa.Column("artist_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("artist_id"),
    )
    op.create_index("idx_singers_created_at", "singers", ["created_at"])

    op.create_table(
        "instruments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("artist_id", sa.Integer(), nullable=False),
        sa.Column("singer_name", sa.String(255), nullable=True),
        sa.Column("instruments", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_instruments_artist_id", "instruments", ["artist_id"])


def downgrade() -> None:
    """Drops both tables; all data is lost."""
    op.drop_index("ix_instruments_artist_id", table_name="instruments")
    op.drop_table("instruments")
    op.drop_index("idx_singers_created_at", table_name="singers")
    op.drop_table("singers")
