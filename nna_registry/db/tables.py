"""SQLAlchemy ORM table models for the NNA Registry.

The taxonomy itself is a read-only document loaded into memory; the only
mutable state is the per-path sequence counter.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from nna_registry.db.session import Base


# ---------------------------------------------------------------------------
# Sequencing (operational)
# ---------------------------------------------------------------------------


class SequenceCounterRow(Base):
    """Last issued sequential for one canonical (layer, category, subcategory) path.

    Keyed by alpha codes. ``count`` only ever increases except through an
    explicit administrative reset.
    """

    __tablename__ = "sequence_counters"

    layer: Mapped[str] = mapped_column(String(1), primary_key=True)
    category: Mapped[str] = mapped_column(String(3), primary_key=True)
    subcategory: Mapped[str] = mapped_column(String(3), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
