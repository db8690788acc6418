from __future__ import annotations

from typing import Any, Iterable, Mapping


def rating_of(answer: Any) -> float | None:
    """Rating value of an answer given as a dict or an object; None for text answers."""
    if isinstance(answer, Mapping):
        return answer.get("rating_value")
    return getattr(answer, "rating_value", None)


def average_score(answers: Iterable[Any]) -> float | None:
    """
    Mean of every present rating value; text-only answers are ignored.

    Returns None (not 0) when no answer carries a rating. Bounds are not
    re-checked here; that happens when the answers are submitted.
    """
    ratings = [float(r) for r in (rating_of(a) for a in answers) if r is not None]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)
