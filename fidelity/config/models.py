"""
Fidelity driver-set configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DriverWeight:
    """
    One driver and its weight inside a composite.
    """

    driver: str
    weight: float = 1.0


@dataclass(frozen=True)
class DriverSets:
    """
    Driver sets keyed by scope level, with a fallback for unlisted levels.
    """

    default: tuple[DriverWeight, ...]
    by_level: dict[str, tuple[DriverWeight, ...]] = field(default_factory=dict)

    def for_level(self, level: str) -> tuple[DriverWeight, ...]:
        return self.by_level.get(level, self.default)
