"""Shape a Scorecard into the rows the report renderer draws."""
from __future__ import annotations

from app.core.config import settings
from app.core.enums import RelationshipType
from app.schemas.report import CycleReport, ReportProjection, ReportRow, ReportSummary
from app.schemas.scorecard import CycleScorecard, Scorecard

NOT_AVAILABLE = "N/A"

# descriptors for evenly spaced points from the bottom to the top of the scale
RATING_SCALE_DESCRIPTORS = [
    "Needs significant improvement",
    "Needs some improvement",
    "Meets expectations",
    "Exceeds expectations",
    "Outstanding performance",
]

# upper bounds as a share of the scale span; the top band is open
BANDS = [(0.25, "critical"), (0.5, "warning"), (0.75, "neutral")]


def _scale(scale_min: float | None, scale_max: float | None) -> tuple[float, float]:
    lo = settings.RATING_SCALE_MIN if scale_min is None else scale_min
    hi = settings.RATING_SCALE_MAX if scale_max is None else scale_max
    if lo >= hi:
        raise ValueError("scale_min must be lower than scale_max")
    return lo, hi


def rating_scale_labels(scale_min: float | None = None, scale_max: float | None = None) -> list[str]:
    """On 1-5 this is "1: Needs significant improvement" through "5: Outstanding performance"."""
    lo, hi = _scale(scale_min, scale_max)
    step = (hi - lo) / (len(RATING_SCALE_DESCRIPTORS) - 1)
    return [f"{lo + i * step:g}: {text}" for i, text in enumerate(RATING_SCALE_DESCRIPTORS)]


def format_score(score: float | None) -> str:
    # 0.0 is a real score and renders as "0.00"
    if score is None:
        return NOT_AVAILABLE
    return f"{score:.2f}"


def score_band(score: float | None, scale_min: float | None = None, scale_max: float | None = None) -> str:
    if score is None:
        return "none"
    lo, hi = _scale(scale_min, scale_max)
    position = (score - lo) / (hi - lo)
    for upper, band in BANDS:
        if position < upper:
            return band
    return "strong"


def _row(
    label: str, count: int, average: float | None, scores: list[float], scale: tuple[float, float]
) -> ReportRow:
    lo = min(scores) if scores else None
    hi = max(scores) if scores else None
    return ReportRow(
        label=label,
        count=count,
        average=average,
        min_score=lo,
        max_score=hi,
        average_display=format_score(average),
        min_display=format_score(lo),
        max_display=format_score(hi),
        band=score_band(average, *scale),
    )


def _cycle_report(card: CycleScorecard, scale: tuple[float, float]) -> CycleReport:
    rows: list[ReportRow] = []
    all_scores: list[float] = []
    total = 0

    for rel in RelationshipType:
        entries = card.buckets.get(rel, [])
        scores = [e.average_score for e in entries if e.average_score is not None]
        rows.append(_row(rel.label, len(entries), card.bucket_averages.get(rel), scores, scale))
        all_scores.extend(scores)
        total += len(entries)

    rows.append(_row("OVERALL", total, card.overall_average, all_scores, scale))

    return CycleReport(
        cycle_id=card.cycle_id,
        cycle_title=card.cycle_title,
        start_date=card.start_date,
        end_date=card.end_date,
        rows=rows,
    )


def project_report(
    scorecard: Scorecard,
    *,
    scale_min: float | None = None,
    scale_max: float | None = None,
) -> ReportProjection:
    """Bands and scale labels follow the configured rating scale unless one is given."""
    scale = _scale(scale_min, scale_max)
    overall_scores = [c.overall_average for c in scorecard.cycles if c.overall_average is not None]
    overall = sum(overall_scores) / len(overall_scores) if overall_scores else None

    return ReportProjection(
        subject_user_id=scorecard.subject_user_id,
        summary=ReportSummary(
            overall_average=overall,
            overall_display=format_score(overall),
            band=score_band(overall, *scale),
            rating_scale=rating_scale_labels(*scale),
        ),
        cycles=[_cycle_report(c, scale) for c in scorecard.cycles],
    )
