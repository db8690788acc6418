from __future__ import annotations

import math
from typing import Any

from app.core.enums import QuestionKind
from app.core.errors import ValidationFailed
from app.models.evaluation_form import EvaluationForm
from app.models.form_question import FormQuestion


def _validate_one(question: FormQuestion, answer: dict[str, Any]) -> list[dict]:
    """
    Kind exclusivity + rating bounds for a single answer.
    Returns list of error dicts (empty if ok).
    """
    errors: list[dict] = []
    key = str(question.id)
    rating = answer.get("rating_value")
    text = answer.get("text_value")

    if question.kind == QuestionKind.RATING.value:
        if text is not None:
            errors.append({"field": key, "code": "kind", "message": "Rating questions take a rating only"})
        if rating is None:
            errors.append({"field": key, "code": "required", "message": "Rating is required"})
            return errors
        if isinstance(rating, bool) or not isinstance(rating, (int, float)) or not math.isfinite(rating):
            errors.append({"field": key, "code": "type", "message": "Rating must be a number"})
            return errors
        if rating < question.rating_min:
            errors.append({"field": key, "code": "min", "message": f"Must be >= {question.rating_min:g}"})
        if rating > question.rating_max:
            errors.append({"field": key, "code": "max", "message": f"Must be <= {question.rating_max:g}"})

    elif question.kind == QuestionKind.TEXT.value:
        if rating is not None:
            errors.append({"field": key, "code": "kind", "message": "Text questions take text only"})
        if text is None or not text.strip():
            errors.append({"field": key, "code": "required", "message": "Text is required"})

    else:
        errors.append({"field": key, "code": "unknown_kind", "message": f"Unknown question kind: {question.kind}"})

    return errors


def validate_answers(
    *,
    form: EvaluationForm,
    answers: list[dict[str, Any]],  # [{"question_id": ..., "rating_value": ..., "text_value": ...}]
) -> list[dict[str, Any]]:
    """
    Check every answer against the form and return the denormalized snapshots
    (question text and category copied in) in the order they were given.
    Raises ValidationFailed carrying every field error at once.
    """
    questions = {str(q.id): q for q in form.questions}

    errors: list[dict] = []
    seen: set[str] = set()
    snapshots: list[dict[str, Any]] = []

    for a in answers:
        key = str(a["question_id"])
        if key not in questions:
            errors.append({"field": key, "code": "unknown_question", "message": "Not in form"})
            continue
        if key in seen:
            errors.append({"field": key, "code": "duplicate", "message": "Answered more than once"})
            continue
        seen.add(key)

        q = questions[key]
        field_errors = _validate_one(q, a)
        if field_errors:
            errors.extend(field_errors)
            continue

        snapshots.append(
            {
                "question_id": key,
                "question_text": q.text,
                "category": q.category,
                "rating_value": a.get("rating_value") if q.kind == QuestionKind.RATING.value else None,
                "text_value": a.get("text_value") if q.kind == QuestionKind.TEXT.value else None,
            }
        )

    if errors:
        raise ValidationFailed("Answer validation failed", errors=errors)
    return snapshots
