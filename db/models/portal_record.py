"""
db/models/portal_record.py

Activity log rows written by the field portal. The impact engine only
reads them.
"""

from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import Date, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class PortalRecord(TimestampMixin, Base):
    __tablename__ = "portal_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    module: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="training, visit, assessment, story",
    )
    school_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    school_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    district: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="Submitted",
        comment="Draft, Submitted, Returned, Approved",
    )
    program_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_portal_records_district_date", "district", "date"),
        Index("ix_portal_records_school_id", "school_id"),
        Index("ix_portal_records_module", "module"),
    )
