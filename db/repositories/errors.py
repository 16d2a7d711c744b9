"""
Repository-layer exceptions for record store reads.
"""

from __future__ import annotations


class RecordStoreUnavailableError(RuntimeError):
    """Raised when the record store cannot be queried."""
