"""
db/models/cost_entry.py

Programme cost lines attributed to a scope and a reporting period.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class CostEntryRecord(TimestampMixin, Base):
    __tablename__ = "cost_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="transport, meals, printing, staff_time, materials, training, assessment, other",
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    scope_type: Mapped[str] = mapped_column(String(32), nullable=False, default="country")
    scope_value: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    period: Mapped[str] = mapped_column(String(32), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_cost_entries_period", "period"),)
