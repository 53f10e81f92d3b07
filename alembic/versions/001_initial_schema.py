"""Initial schema: per-path sequence counters.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # -- Sequencing (OPERATIONAL) --
    op.create_table(
        "sequence_counters",
        sa.Column("layer", sa.String(1), primary_key=True),
        sa.Column("category", sa.String(3), primary_key=True),
        sa.Column("subcategory", sa.String(3), primary_key=True),
        sa.Column("count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("sequence_counters")
