"""
Model package exports.

Import all SQLAlchemy models here so metadata registration works without
extra imports.
"""

from db.models.cost_entry import CostEntryRecord
from db.models.portal_record import PortalRecord

__all__ = [
    "CostEntryRecord",
    "PortalRecord",
]
