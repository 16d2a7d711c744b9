"""
performance/eligibility.py

Weaning (graduation) eligibility for schools.

A school is eligible only when every ScoreCard dimension independently
clears the threshold. This is a hard gate, not a weighted composite.
"""

from __future__ import annotations

from typing import Final

from records.types import ScoreCard

WEANING_THRESHOLD: Final[float] = 8.0


def is_weaning_eligible(scorecard: ScoreCard, threshold: float = WEANING_THRESHOLD) -> bool:
    """True iff all five dimensions are >= *threshold*."""
    return all(value >= threshold for value in scorecard.as_dict().values())


def weaning_gaps(scorecard: ScoreCard, threshold: float = WEANING_THRESHOLD) -> dict[str, float]:
    """Shortfall per dimension still below *threshold* (empty when eligible)."""
    return {
        name: threshold - value
        for name, value in scorecard.as_dict().items()
        if value < threshold
    }
