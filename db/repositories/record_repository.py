"""
Read-only repository over portal records and cost entries.

Scope filters pushed into SQL are deliberately coarse (a superset of the
scope); the engine re-applies the exact hierarchy rules to every record.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.cost_entry import CostEntryRecord
from db.models.portal_record import PortalRecord
from db.repositories.errors import RecordStoreUnavailableError
from hierarchy.resolver import UNKNOWN_DISTRICT, districts_in_region
from hierarchy.scope import Scope, ScopeLevel
from records.types import CostEntry, RawRecord

logger = logging.getLogger(__name__)


class RecordRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch_records(
        self,
        scope: Scope,
        *,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[RawRecord]:
        """
        Records that may belong to *scope*, optionally bounded by date (inclusive).

        Raises:
            RecordStoreUnavailableError: The query failed.
        """

        stmt = _scope_filter(select(PortalRecord), scope)
        if date_from is not None:
            stmt = stmt.where(PortalRecord.date >= date_from)
        if date_to is not None:
            stmt = stmt.where(PortalRecord.date <= date_to)
        stmt = stmt.order_by(PortalRecord.date, PortalRecord.id)

        try:
            rows = self._session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            logger.error("Record query failed scope=%s:%s: %s", scope.level, scope.identifier, exc)
            raise RecordStoreUnavailableError("Record store query failed.") from exc

        logger.debug("Fetched %d records scope=%s:%s", len(rows), scope.level, scope.identifier)
        return [_to_raw_record(row) for row in rows]

    def fetch_cost_entries(self, period: str | None = None) -> list[CostEntry]:
        """
        Cost entries for *period*, or every period when None.

        Raises:
            RecordStoreUnavailableError: The query failed.
        """

        stmt = select(CostEntryRecord).order_by(CostEntryRecord.id)
        if period:
            stmt = stmt.where(func.lower(func.trim(CostEntryRecord.period)) == period.strip().lower())

        try:
            rows = self._session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            logger.error("Cost entry query failed period=%s: %s", period, exc)
            raise RecordStoreUnavailableError("Record store query failed.") from exc

        return [
            CostEntry.from_mapping(
                {
                    "category": row.category,
                    "amount": float(row.amount),
                    "scope_type": row.scope_type,
                    "scope_value": row.scope_value,
                    "period": row.period,
                    "notes": row.notes,
                }
            )
            for row in rows
        ]


def _scope_filter(stmt: Select, scope: Scope) -> Select:
    wanted = scope.identifier.strip().lower()
    if scope.level == ScopeLevel.DISTRICT and wanted != UNKNOWN_DISTRICT.lower():
        return stmt.where(func.lower(func.trim(PortalRecord.district)) == wanted)
    if scope.level == ScopeLevel.REGION:
        districts = [district.lower() for district in districts_in_region(scope.identifier)]
        if districts:
            return stmt.where(func.lower(func.trim(PortalRecord.district)).in_(districts))
        return stmt
    if scope.level == ScopeLevel.SCHOOL:
        return stmt.where(
            or_(
                PortalRecord.school_id == scope.identifier.strip(),
                func.lower(func.trim(PortalRecord.school_name)) == wanted,
            )
        )
    # Country and sub-county scopes are resolved in the engine.
    return stmt


def _to_raw_record(row: PortalRecord) -> RawRecord:
    return RawRecord(
        id=row.id,
        module=row.module,
        school_id=row.school_id,
        school_name=row.school_name or "",
        district=row.district or "",
        date=row.date,
        status=row.status,
        payload=row.payload if isinstance(row.payload, dict) else {},
        program_type=row.program_type,
    )
