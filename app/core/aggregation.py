"""
Multi-rater aggregation.

build_scorecard() folds a subject's completed responses into per-cycle
relationship buckets. It is a pure function of its input: nothing is cached
and nothing is read from the database here.
"""
from __future__ import annotations

import math
from typing import Iterable

import structlog

from app.core.enums import RelationshipType, ResponseStatus
from app.core.errors import DataIntegrityError
from app.core.scoring import average_score
from app.schemas.scorecard import (
    CycleScorecard,
    IntegrityIssue,
    ResponseSnapshot,
    Scorecard,
    ScorecardEntry,
)

logger = structlog.get_logger(__name__)


def _mean(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def integrity_problem(r: ResponseSnapshot) -> str | None:
    """Why a completed snapshot can't be trusted, or None if it can."""
    try:
        RelationshipType(r.relationship_type)
    except ValueError:
        return f"unknown relationship type {r.relationship_type!r}"

    expected = average_score(r.answers)
    if r.average_score is not None and expected is None:
        return "average score present without rating answers"
    if r.average_score is None and expected is not None:
        return "rating answers present but no average score"
    if r.average_score is not None and not math.isclose(r.average_score, expected, abs_tol=1e-9):
        return f"stored average {r.average_score} disagrees with answers ({expected})"
    return None


def category_means(responses: Iterable[ResponseSnapshot]) -> dict[str, float]:
    """
    Pool every rating answer by its denormalized category.
    Keys keep first-appearance order.
    """
    pooled: dict[str, list[float]] = {}
    for r in responses:
        for a in r.answers:
            if a.rating_value is None:
                continue
            pooled.setdefault(a.category, []).append(float(a.rating_value))
    return {category: sum(vals) / len(vals) for category, vals in pooled.items()}


def _entry(r: ResponseSnapshot, rel: RelationshipType) -> ScorecardEntry:
    return ScorecardEntry(
        response_id=r.response_id,
        evaluator_name="Self" if rel == RelationshipType.SELF else r.evaluator_name,
        form_title=r.form_title,
        average_score=r.average_score,
        submitted_at=r.submitted_at,
    )


def _fold_cycle(
    rows: list[ResponseSnapshot], issues: list[IntegrityIssue], strict: bool
) -> tuple[CycleScorecard, list[ResponseSnapshot]]:
    first = rows[0]
    buckets: dict[RelationshipType, list[ScorecardEntry]] = {rel: [] for rel in RelationshipType}
    kept: list[ResponseSnapshot] = []

    for r in rows:
        rel = RelationshipType(r.relationship_type)
        if rel == RelationshipType.SELF and buckets[rel]:
            reason = "more than one self evaluation in cycle"
            if strict:
                raise DataIntegrityError(
                    "Response failed integrity check",
                    errors=[{"field": r.response_id, "code": "integrity", "message": reason}],
                )
            issues.append(IntegrityIssue(response_id=r.response_id, reason=reason))
            continue
        buckets[rel].append(_entry(r, rel))
        kept.append(r)

    bucket_averages: dict[RelationshipType, float] = {}
    for rel, entries in buckets.items():
        avg = _mean([e.average_score for e in entries if e.average_score is not None])
        if avg is not None:
            bucket_averages[rel] = avg

    # one unit per response, so sparse rater types are not over-weighted
    overall = _mean([r.average_score for r in kept if r.average_score is not None])

    card = CycleScorecard(
        cycle_id=first.cycle_id,
        cycle_title=first.cycle_title,
        start_date=first.cycle_start,
        end_date=first.cycle_end,
        buckets=buckets,
        bucket_averages=bucket_averages,
        overall_average=overall,
    )
    return card, kept


def build_scorecard(
    subject_user_id: str,
    responses: Iterable[ResponseSnapshot],
    *,
    strict: bool = False,
) -> Scorecard:
    """
    Aggregate a subject's responses into a Scorecard.

    Non-completed responses are skipped. A completed response that fails
    integrity_problem() is excluded and listed in integrity_issues; with
    strict=True the first such response raises DataIntegrityError instead.
    """
    issues: list[IntegrityIssue] = []
    by_cycle: dict[str, list[ResponseSnapshot]] = {}

    for r in responses:
        if r.status != ResponseStatus.COMPLETED.value:
            continue
        problem = integrity_problem(r)
        if problem:
            if strict:
                raise DataIntegrityError(
                    "Response failed integrity check",
                    errors=[{"field": r.response_id, "code": "integrity", "message": problem}],
                )
            issues.append(IntegrityIssue(response_id=r.response_id, reason=problem))
            continue
        by_cycle.setdefault(r.cycle_id, []).append(r)

    cycles: list[CycleScorecard] = []
    included: list[ResponseSnapshot] = []
    for rows in by_cycle.values():
        card, kept = _fold_cycle(rows, issues, strict)
        cycles.append(card)
        included.extend(kept)

    for issue in issues:
        logger.warning(
            "scorecard.integrity_issue",
            subject_user_id=subject_user_id,
            response_id=issue.response_id,
            reason=issue.reason,
        )

    return Scorecard(
        subject_user_id=subject_user_id,
        cycles=cycles,
        category_means=category_means(included),
        integrity_issues=issues,
    )
