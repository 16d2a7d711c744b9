"""
fidelity/base.py

Abstract base interface for fidelity drivers.
All driver implementations must inherit from BaseFidelityDriver.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from records.normalizer import NormalizedSnapshot


@dataclass(frozen=True)
class DriverResult:
    """Raw outcome of one driver before weighting."""

    score: float
    """Driver score in [0, 100]."""

    detail: str
    """Human-readable explanation of the completed / planned counts."""


class BaseFidelityDriver(ABC):
    """Abstract base class for fidelity drivers.

    A driver turns one scope's normalized records into a 0-100 score from
    a ratio of completed to planned activity. Drivers are stateless and
    perform no I/O.
    """

    key: str = ""
    label: str = ""

    @abstractmethod
    def compute(self, snapshot: NormalizedSnapshot) -> DriverResult:
        """Compute this driver's score for the scope covered by *snapshot*.

        Args:
            snapshot: Normalized, scope-restricted record views.

        Returns:
            A DriverResult whose score lies in [0, 100].
        """
        raise NotImplementedError("Subclasses must implement compute()")


def ratio_score(completed: float, planned: float) -> float:
    """100 * completed / planned, clamped to [0, 100]; 0 when nothing was planned."""
    if planned <= 0:
        return 0.0
    return max(0.0, min(100.0, 100.0 * completed / planned))
