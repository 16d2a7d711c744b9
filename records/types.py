"""
records/types.py

Typed value objects shared by every analyzer.

RawRecord and CostEntry are read-only views of rows owned by the record
store. ScoreCard is derived from assessment payloads by the normalizer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, ClassVar, Final, Mapping

from records.payload import Payload, PayloadValue, coerce_number

logger = logging.getLogger(__name__)


class RecordModule:
    TRAINING = "training"
    VISIT = "visit"
    ASSESSMENT = "assessment"
    STORY = "story"

    ALL: Final[frozenset[str]] = frozenset({TRAINING, VISIT, ASSESSMENT, STORY})


class RecordStatus:
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    RETURNED = "Returned"
    APPROVED = "Approved"


class AssessmentStage:
    BASELINE = "baseline"
    PROGRESS = "progress"
    ENDLINE = "endline"

    ALL: Final[frozenset[str]] = frozenset({BASELINE, PROGRESS, ENDLINE})


class CostCategory:
    TRANSPORT = "transport"
    MEALS = "meals"
    PRINTING = "printing"
    STAFF_TIME = "staff_time"
    MATERIALS = "materials"
    TRAINING = "training"
    ASSESSMENT = "assessment"
    OTHER = "other"

    ORDERED: Final[tuple[str, ...]] = (
        TRANSPORT,
        MEALS,
        PRINTING,
        STAFF_TIME,
        MATERIALS,
        TRAINING,
        ASSESSMENT,
        OTHER,
    )


@dataclass(frozen=True)
class LearningDomain:
    """One reading-skill domain and the payload key it is recorded under."""

    key: str
    label: str
    payload_key: str


LEARNING_DOMAINS: Final[tuple[LearningDomain, ...]] = (
    LearningDomain("letter_identification", "Letter Identification", "letterIdentificationScore"),
    LearningDomain("sound_identification", "Sound Identification", "soundIdentificationScore"),
    LearningDomain("decodable_words", "Decodable Words", "decodableWordsScore"),
    LearningDomain("undecodable_words", "Undecodable Words", "undecodableWordsScore"),
    LearningDomain("made_up_words", "Made Up Words", "madeUpWordsScore"),
    LearningDomain("story_reading", "Story Reading", "storyReadingScore"),
    LearningDomain("reading_comprehension", "Reading Comprehension", "readingComprehensionScore"),
)


# ---------------------------------------------------------------------------
# ScoreCard
# ---------------------------------------------------------------------------

SCORECARD_MIN: Final[float] = 0.0
SCORECARD_MAX: Final[float] = 10.0


@dataclass(frozen=True)
class ScoreCard:
    """Five-dimension observation rating for one school, each in [0, 10]."""

    instruction: float = 0.0
    outcomes: float = 0.0
    leadership: float = 0.0
    community: float = 0.0
    environment: float = 0.0

    DIMENSIONS: ClassVar[tuple[str, ...]] = (
        "instruction",
        "outcomes",
        "leadership",
        "community",
        "environment",
    )

    @classmethod
    def zero(cls) -> "ScoreCard":
        return cls()

    @classmethod
    def mean_of(cls, cards: list["ScoreCard"]) -> "ScoreCard":
        """Field-wise arithmetic mean; an empty list yields all zeros."""
        if not cards:
            return cls.zero()
        count = len(cards)
        return cls(
            **{
                name: sum(getattr(card, name) for card in cards) / count
                for name in cls.DIMENSIONS
            }
        )

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.DIMENSIONS}

    def minimum(self) -> float:
        return min(self.as_dict().values())


# Payload key for each ScoreCard dimension.
SCORECARD_FIELDS: Final[dict[str, str]] = {
    name: f"score_{name}" for name in ScoreCard.DIMENSIONS
}


# ---------------------------------------------------------------------------
# RawRecord
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawRecord:
    """
    One activity log entry as supplied by the record store.

    ``payload`` is wrapped in a read-only mapping; the engine never
    mutates a record.
    """

    id: int
    module: str
    school_id: str | None
    school_name: str
    district: str
    date: date
    status: str = RecordStatus.SUBMITTED
    payload: Payload = field(default_factory=dict)
    program_type: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.payload, MappingProxyType):
            object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    @property
    def school_key(self) -> str | None:
        """Stable school identifier, or None when the record has no school."""
        if self.school_id is None:
            return None
        key = str(self.school_id).strip()
        return key or None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RawRecord":
        """
        Build a record from a loosely-shaped dict (camelCase or snake_case).

        Never raises on bad field values: unknown modules become ``story``,
        unparseable dates become ``date.min``, a non-mapping payload is
        treated as empty.
        """
        module = str(_first(data, "module") or "").strip().lower()
        if module not in RecordModule.ALL:
            logger.debug("Unknown record module %r mapped to story", module)
            module = RecordModule.STORY

        raw_school_id = _first(data, "schoolId", "school_id")
        school_id = None if raw_school_id in (None, "") else str(raw_school_id)

        payload = _first(data, "payload")
        if not isinstance(payload, Mapping):
            payload = {}

        try:
            record_id = int(_first(data, "id") or 0)
        except (TypeError, ValueError):
            record_id = 0

        program_type = _first(data, "programType", "program_type")

        return cls(
            id=record_id,
            module=module,
            school_id=school_id,
            school_name=str(_first(data, "schoolName", "school_name") or "").strip(),
            district=str(_first(data, "district") or "").strip(),
            date=parse_date(_first(data, "date")),
            status=str(_first(data, "status") or RecordStatus.SUBMITTED).strip(),
            payload=dict(payload),
            program_type=str(program_type) if program_type else None,
        )


# ---------------------------------------------------------------------------
# CostEntry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CostEntry:
    """One cost line attributed to a scope and a reporting period."""

    category: str
    amount: float
    scope_type: str
    scope_value: str
    period: str
    notes: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CostEntry":
        """Build an entry; unknown categories become ``other``, bad amounts ``0.0``."""
        category = str(_first(data, "category") or "").strip().lower()
        if category not in CostCategory.ORDERED:
            category = CostCategory.OTHER
        raw_amount: PayloadValue = _first(data, "amount")  # type: ignore[assignment]
        return cls(
            category=category,
            amount=coerce_number(raw_amount),
            scope_type=str(_first(data, "scopeType", "scope_type") or "country").strip().lower(),
            scope_value=str(_first(data, "scopeValue", "scope_value") or "").strip(),
            period=str(_first(data, "period") or "").strip(),
            notes=_first(data, "notes"),
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_date(value: Any) -> date:
    """Parse a date or ISO string; anything unusable becomes ``date.min``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip().replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            try:
                return date.fromisoformat(text[:10])
            except ValueError:
                return date.min
    return date.min


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None
