from __future__ import annotations

from typing import Mapping

from app.core.config import settings
from app.core.enums import ClassificationOutcome
from app.schemas.scorecard import LowScoreClassification

DEFAULT_THRESHOLD_RATIO = 0.5


def low_score_threshold(scale_min: float, scale_max: float, ratio: float = DEFAULT_THRESHOLD_RATIO) -> float:
    """
    Threshold as a position on the rating scale.

    ratio 0.5 on 1-5 is 3.0; on 1-10 it is 5.5.
    """
    if scale_min >= scale_max:
        raise ValueError("scale_min must be lower than scale_max")
    if not 0 <= ratio <= 1:
        raise ValueError("ratio must be within [0, 1]")
    return scale_min + ratio * (scale_max - scale_min)


def configured_threshold() -> float:
    return low_score_threshold(
        settings.RATING_SCALE_MIN,
        settings.RATING_SCALE_MAX,
        settings.LOW_SCORE_THRESHOLD_RATIO,
    )


def classify_low_score_categories(
    category_means: Mapping[str, float],
    threshold: float | None = None,
) -> LowScoreClassification:
    """
    Categories whose mean is strictly below threshold, in the mapping's
    order (not sorted by score). An empty result is the
    NO_DEVELOPMENT_AREAS outcome, not an error.

    threshold defaults to the configured ratio of the configured rating scale.
    """
    if threshold is None:
        threshold = configured_threshold()
    low = [name for name, mean in category_means.items() if mean < threshold]
    outcome = ClassificationOutcome.DEVELOPMENT_AREAS if low else ClassificationOutcome.NO_DEVELOPMENT_AREAS
    return LowScoreClassification(outcome=outcome, threshold=threshold, categories=low)
