"""
records/normalizer.py

Record Normalizer.

Turns heterogeneous RawRecord payloads into the typed views each analyzer
consumes. A record missing the fields for one view is simply absent from
that view; no record is ever rejected and malformed numbers coerce to 0.

Views
-----
scorecards      school -> (record, ScoreCard) from the newest assessment
                record carrying at least one ``score_*`` field
paths           school -> HierarchyPath; each level from the newest of the
                school's records that knows it
domain_samples  domain -> baseline / endline readings
cost_totals     category -> summed amount
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from hierarchy.resolver import HierarchyPath, merge_paths, resolve_path
from hierarchy.scope import Scope
from records.payload import payload_has, payload_number, payload_optional_number, payload_text
from records.types import (
    LEARNING_DOMAINS,
    SCORECARD_FIELDS,
    SCORECARD_MAX,
    SCORECARD_MIN,
    AssessmentStage,
    CostCategory,
    CostEntry,
    LearningDomain,
    RawRecord,
    RecordModule,
    ScoreCard,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Single-record accessors
# ---------------------------------------------------------------------------


def raw_scorecard_values(record: RawRecord) -> dict[str, float] | None:
    """
    Unclamped ScoreCard values, or None when the record carries no score field.

    Only assessment records can carry a ScoreCard.
    """
    if record.module != RecordModule.ASSESSMENT:
        return None
    if not any(payload_has(record.payload, key) for key in SCORECARD_FIELDS.values()):
        return None
    return {
        name: payload_number(record.payload, key)
        for name, key in SCORECARD_FIELDS.items()
    }


def extract_scorecard(record: RawRecord) -> ScoreCard | None:
    """ScoreCard for *record* with every dimension clamped to [0, 10]."""
    values = raw_scorecard_values(record)
    if values is None:
        return None
    return ScoreCard(
        **{name: _clamp(value, SCORECARD_MIN, SCORECARD_MAX) for name, value in values.items()}
    )


def assessment_stage(record: RawRecord) -> str | None:
    """Explicit assessment stage from the ``assessmentType`` field, if any."""
    if record.module != RecordModule.ASSESSMENT:
        return None
    stage = payload_text(record.payload, "assessmentType").lower()
    return stage if stage in AssessmentStage.ALL else None


def domain_reading(record: RawRecord, domain: LearningDomain) -> float | None:
    """One domain score from an assessment record; None when not recorded."""
    if record.module != RecordModule.ASSESSMENT:
        return None
    return payload_optional_number(record.payload, domain.payload_key)


def normalize_identity(value: str) -> str:
    """Case- and whitespace-insensitive identity key."""
    return " ".join(value.split()).casefold()


def learner_identity(record: RawRecord) -> str | None:
    """Normalized learner identity (``childId``, else ``childName``)."""
    for key in ("childId", "childName"):
        text = payload_text(record.payload, key)
        if text:
            return normalize_identity(text)
    return None


def recency_key(record: RawRecord) -> tuple:
    return (record.date, record.id)


def assessment_stage_pairs(records: Iterable[RawRecord]) -> set[tuple[str, str]]:
    """Distinct (school, stage) pairs among assessment records with an explicit stage."""
    pairs: set[tuple[str, str]] = set()
    for record in records:
        stage = assessment_stage(record)
        if record.school_key is not None and stage is not None:
            pairs.add((record.school_key, stage))
    return pairs


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DomainSamples:
    """Baseline and endline readings for one learning domain."""

    domain: LearningDomain
    baseline: tuple[float, ...] = ()
    endline: tuple[float, ...] = ()


@dataclass(frozen=True)
class NormalizedSnapshot:
    """Every normalized view over one scope's record set."""

    scope: Scope
    records: tuple[RawRecord, ...]
    paths: dict[str, HierarchyPath]
    scorecards: dict[str, tuple[RawRecord, ScoreCard]]
    domain_samples: dict[str, DomainSamples]
    cost_entries: tuple[CostEntry, ...] = ()
    cost_totals: dict[str, float] = field(default_factory=dict)

    @property
    def school_keys(self) -> list[str]:
        return sorted(self.paths)

    def records_for(self, module: str) -> list[RawRecord]:
        return [record for record in self.records if record.module == module]


def latest_scorecards(records: Iterable[RawRecord]) -> dict[str, tuple[RawRecord, ScoreCard]]:
    """Newest ScoreCard per school (date descending, record id breaks ties)."""
    latest: dict[str, tuple[RawRecord, ScoreCard]] = {}
    for record in sorted(records, key=recency_key, reverse=True):
        school = record.school_key
        if school is None or school in latest:
            continue
        scorecard = extract_scorecard(record)
        if scorecard is not None:
            latest[school] = (record, scorecard)
    return latest


def school_paths(records: Iterable[RawRecord]) -> dict[str, HierarchyPath]:
    """
    One HierarchyPath per school across all of its records.

    Each level comes from the newest record that knows it, so a newer visit
    without ``subCounty`` leaves the school in its sub-county.
    """
    paths: dict[str, HierarchyPath] = {}
    for record in sorted(records, key=recency_key, reverse=True):
        school = record.school_key
        if school is None:
            continue
        path = resolve_path(record)
        known = paths.get(school)
        paths[school] = path if known is None else merge_paths(known, path)
    return paths


def collect_domain_samples(records: Iterable[RawRecord]) -> dict[str, DomainSamples]:
    """Partition domain readings by explicit stage; progress readings are ignored."""
    baseline: dict[str, list[float]] = {domain.key: [] for domain in LEARNING_DOMAINS}
    endline: dict[str, list[float]] = {domain.key: [] for domain in LEARNING_DOMAINS}

    for record in records:
        stage = assessment_stage(record)
        if stage == AssessmentStage.BASELINE:
            bucket = baseline
        elif stage == AssessmentStage.ENDLINE:
            bucket = endline
        else:
            continue
        for domain in LEARNING_DOMAINS:
            value = domain_reading(record, domain)
            if value is not None:
                bucket[domain.key].append(value)

    return {
        domain.key: DomainSamples(
            domain=domain,
            baseline=tuple(baseline[domain.key]),
            endline=tuple(endline[domain.key]),
        )
        for domain in LEARNING_DOMAINS
    }


def sum_costs_by_category(entries: Iterable[CostEntry]) -> dict[str, float]:
    """Summed amount per category, every category present (zero when unused)."""
    totals = {category: 0.0 for category in CostCategory.ORDERED}
    for entry in entries:
        totals[entry.category] = totals.get(entry.category, 0.0) + entry.amount
    return totals


def normalize_records(
    records: Sequence[RawRecord],
    *,
    scope: Scope | None = None,
    cost_entries: Sequence[CostEntry] = (),
) -> NormalizedSnapshot:
    """
    Restrict *records* to *scope* and build every normalized view.

    Cost entries are attached as given; scope matching for costs belongs to
    the cost calculator, which knows the cost-scope rules.
    """
    active_scope = scope or Scope.country()
    paths = {
        school: path
        for school, path in school_paths(records).items()
        if active_scope.contains(path)
    }
    in_scope = tuple(record for record in records if _in_scope(record, paths, active_scope))
    snapshot = NormalizedSnapshot(
        scope=active_scope,
        records=in_scope,
        paths=paths,
        scorecards=latest_scorecards(in_scope),
        domain_samples=collect_domain_samples(in_scope),
        cost_entries=tuple(cost_entries),
        cost_totals=sum_costs_by_category(cost_entries),
    )
    logger.debug(
        "Normalized %d/%d records scope=%s:%s schools=%d scorecards=%d",
        len(in_scope),
        len(records),
        active_scope.level,
        active_scope.identifier,
        len(snapshot.paths),
        len(snapshot.scorecards),
    )
    return snapshot


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


def _in_scope(record: RawRecord, paths: dict[str, HierarchyPath], scope: Scope) -> bool:
    """School records follow their school's path; school-less records use their own."""
    if record.school_key is not None:
        return record.school_key in paths
    return scope.contains(resolve_path(record))
