"""
Response lifecycle: one response per (cycle, form, evaluator, evaluated user).

record_response() is the only write path. The store makes the
lookup-then-write atomic per tuple:

  1. SELECT ... FOR UPDATE on the tuple
  2. if absent, INSERT inside a SAVEPOINT
  3. if the INSERT hits uq_evaluation_responses_tuple, a concurrent first
     submission won: re-read it under lock and overwrite (last write wins)

A completed response that is saved as completed again keeps its
submitted_at; only the transition into completed stamps it.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.enums import RelationshipType, ResponseStatus
from app.core.errors import ValidationFailed
from app.core.scoring import average_score
from app.models.evaluation_response import EvaluationResponse

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResponseKey:
    cycle_id: uuid.UUID
    form_id: uuid.UUID
    evaluator_id: uuid.UUID
    evaluated_user_id: uuid.UUID


class ResponseStore(Protocol):
    def find_by_tuple(self, key: ResponseKey) -> EvaluationResponse | None: ...

    def upsert(
        self,
        key: ResponseKey,
        *,
        relationship_type: str,
        answers: list[dict[str, Any]],
        status: str,
        average_score: float | None,
        submitted_at: datetime | None,
    ) -> tuple[EvaluationResponse, bool]:
        """Returns (row, created)."""
        ...


class SqlResponseStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_tuple(self, key: ResponseKey, *, lock: bool = False) -> EvaluationResponse | None:
        q = self.db.query(EvaluationResponse).filter(
            EvaluationResponse.cycle_id == key.cycle_id,
            EvaluationResponse.form_id == key.form_id,
            EvaluationResponse.evaluator_id == key.evaluator_id,
            EvaluationResponse.evaluated_user_id == key.evaluated_user_id,
        )
        if lock:
            q = q.with_for_update()
        return q.one_or_none()

    def _overwrite(self, row: EvaluationResponse, values: dict[str, Any]) -> EvaluationResponse:
        completed = ResponseStatus.COMPLETED.value
        if row.status == completed and values["status"] == completed and row.submitted_at is not None:
            # re-saving a completed response keeps the first submission time
            values = {**values, "submitted_at": row.submitted_at}
        for name, value in values.items():
            setattr(row, name, value)
        row.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return row

    def upsert(
        self,
        key: ResponseKey,
        *,
        relationship_type: str,
        answers: list[dict[str, Any]],
        status: str,
        average_score: float | None,
        submitted_at: datetime | None,
    ) -> tuple[EvaluationResponse, bool]:
        values = {
            "relationship_type": relationship_type,
            "answers": list(answers),
            "status": status,
            "average_score": average_score,
            "submitted_at": submitted_at,
        }

        existing = self.find_by_tuple(key, lock=True)
        if existing:
            return self._overwrite(existing, values), False

        # SAVEPOINT so a unique-constraint hit doesn't poison the outer txn
        try:
            with self.db.begin_nested():
                row = EvaluationResponse(
                    cycle_id=key.cycle_id,
                    form_id=key.form_id,
                    evaluator_id=key.evaluator_id,
                    evaluated_user_id=key.evaluated_user_id,
                    **values,
                )
                self.db.add(row)
                self.db.flush()
        except IntegrityError:
            existing = self.find_by_tuple(key, lock=True)
            if existing is None:
                # not the tuple constraint (e.g. a dangling foreign key)
                raise
            logger.info("response.concurrent_insert", cycle_id=str(key.cycle_id), evaluator_id=str(key.evaluator_id))
            return self._overwrite(existing, values), False

        return row, True


def parse_relationship_type(value: str) -> RelationshipType:
    try:
        return RelationshipType(value)
    except ValueError:
        raise ValidationFailed(
            "Unknown relationship type",
            errors=[{"field": "relationship_type", "code": "choice",
                     "message": f"Must be one of {[r.value for r in RelationshipType]}"}],
        )


def parse_response_status(value: str | None) -> ResponseStatus:
    if value is None:
        return ResponseStatus.COMPLETED
    try:
        return ResponseStatus(value)
    except ValueError:
        raise ValidationFailed(
            "Unknown response status",
            errors=[{"field": "status", "code": "choice",
                     "message": f"Must be one of {[s.value for s in ResponseStatus]}"}],
        )


def record_response(
    *,
    store: ResponseStore,
    key: ResponseKey,
    relationship_type: str,
    answers: list[dict[str, Any]],
    status: str | None = None,
    now: datetime | None = None,
) -> EvaluationResponse:
    """
    Create or overwrite the response for key.

    status defaults to completed. Only a completed response is scored and
    stamped; drafts carry neither an average nor a submitted_at.
    submitted_at marks the transition into completed, so overwriting a
    response that is already completed keeps its original time.
    """
    rel = parse_relationship_type(relationship_type)
    resolved = parse_response_status(status)

    if resolved == ResponseStatus.COMPLETED and not answers:
        raise ValidationFailed(
            "Completed responses need at least one answer",
            errors=[{"field": "answers", "code": "required", "message": "Required"}],
        )
    if resolved == ResponseStatus.PENDING and answers:
        raise ValidationFailed(
            "Pending responses cannot carry answers",
            errors=[{"field": "answers", "code": "status", "message": "Use in_progress to save a draft"}],
        )

    if resolved == ResponseStatus.COMPLETED:
        score = average_score(answers)
        submitted_at = now or datetime.now(timezone.utc)
    else:
        score = None
        submitted_at = None

    row, created = store.upsert(
        key,
        relationship_type=rel.value,
        answers=answers,
        status=resolved.value,
        average_score=score,
        submitted_at=submitted_at,
    )

    logger.info(
        "response.recorded",
        response_id=str(row.id),
        cycle_id=str(key.cycle_id),
        relationship_type=rel.value,
        status=resolved.value,
        created=created,
        average_score=score,
    )
    return row
