from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.access import get_user_or_404
from app.core.audit import log_event
from app.core.enums import CycleStatus, ParticipantStatus, RelationshipType, ResponseStatus
from app.core.errors import Conflict, NotFound, ValidationFailed
from app.core.form_validation import validate_answers
from app.core.responses import ResponseKey, SqlResponseStore, parse_relationship_type, record_response
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.cycle_participant import CycleParticipant
from app.models.evaluation_cycle import EvaluationCycle
from app.models.evaluation_form import EvaluationForm
from app.models.evaluation_response import EvaluationResponse
from app.models.user import User
from app.schemas.evaluation_response import PendingResponseOut, ResponseOut, ResponseSubmit

router = APIRouter(prefix="/responses", tags=["responses"])


def response_to_out(r: EvaluationResponse) -> ResponseOut:
    return ResponseOut(
        id=r.id,
        cycle_id=r.cycle_id,
        form_id=r.form_id,
        evaluator_id=r.evaluator_id,
        evaluated_user_id=r.evaluated_user_id,
        relationship_type=r.relationship_type,
        status=r.status,
        answers=r.answers or [],
        average_score=r.average_score,
        submitted_at=r.submitted_at,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def _check_relationship(form: EvaluationForm, rel: RelationshipType, evaluator: User, evaluated: User) -> None:
    errors: list[dict] = []
    if form.evaluation_type != rel.value:
        errors.append({
            "field": "relationship_type",
            "code": "form_type",
            "message": f"Form is for {form.evaluation_type} evaluations",
        })
    is_self = evaluator.id == evaluated.id
    if is_self and rel != RelationshipType.SELF:
        errors.append({"field": "relationship_type", "code": "self", "message": "Evaluating yourself requires self"})
    if rel == RelationshipType.SELF and not is_self:
        errors.append({"field": "relationship_type", "code": "self", "message": "Self evaluations must target yourself"})
    if errors:
        raise ValidationFailed("Relationship validation failed", errors=errors)


def _check_single_self(db: Session, cycle: EvaluationCycle, form: EvaluationForm, evaluated: User) -> None:
    # one self evaluation per subject per cycle, whichever self form it used
    other = (
        db.query(EvaluationResponse.id)
        .filter(
            EvaluationResponse.cycle_id == cycle.id,
            EvaluationResponse.evaluated_user_id == evaluated.id,
            EvaluationResponse.relationship_type == RelationshipType.SELF.value,
            EvaluationResponse.form_id != form.id,
        )
        .first()
    )
    if other:
        raise Conflict("A self evaluation already exists for this cycle under another form")


def _touch_participant(db: Session, cycle: EvaluationCycle, user: User) -> None:
    p = (
        db.query(CycleParticipant)
        .filter(CycleParticipant.cycle_id == cycle.id, CycleParticipant.user_id == user.id)
        .one_or_none()
    )
    if p and p.status == ParticipantStatus.NOT_STARTED.value:
        p.status = ParticipantStatus.IN_PROGRESS.value


@router.post("", response_model=ResponseOut)
def submit_response(
    payload: ResponseSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create or overwrite the caller's response for (cycle, form, evaluated user).
    A second submission for the same tuple replaces answers and status.
    """
    cycle = db.get(EvaluationCycle, payload.cycle_id)
    if not cycle:
        raise NotFound("Cycle not found")
    if cycle.status != CycleStatus.ACTIVE.value:
        raise Conflict("Responses can only be recorded while cycle is active")
    today = date.today()
    if not (cycle.start_date <= today < cycle.end_date):
        raise Conflict("Responses can only be recorded within the cycle dates")

    form = db.get(EvaluationForm, payload.form_id)
    if not form:
        raise NotFound("Evaluation form not found")
    if not form.is_active:
        raise Conflict("Evaluation form is inactive")

    evaluated = get_user_or_404(db, payload.evaluated_user_id)

    rel = parse_relationship_type(payload.relationship_type)
    _check_relationship(form, rel, current_user, evaluated)
    if rel == RelationshipType.SELF:
        _check_single_self(db, cycle, form, evaluated)

    answers = validate_answers(form=form, answers=[a.model_dump() for a in payload.answers])

    key = ResponseKey(
        cycle_id=cycle.id,
        form_id=form.id,
        evaluator_id=current_user.id,
        evaluated_user_id=evaluated.id,
    )
    row = record_response(
        store=SqlResponseStore(db),
        key=key,
        relationship_type=rel.value,
        answers=answers,
        status=payload.status,
    )

    _touch_participant(db, cycle, current_user)

    log_event(
        db=db,
        actor=current_user,
        action="RESPONSE_RECORDED",
        entity_type="evaluation_response",
        entity_id=row.id,
        metadata={
            "cycle_id": str(cycle.id),
            "form_id": str(form.id),
            "evaluated_user_id": str(evaluated.id),
            "relationship_type": row.relationship_type,
            "status": row.status,
            "answer_count": len(answers),
        },
    )

    db.commit()
    db.refresh(row)
    return response_to_out(row)


@router.get("/pending", response_model=list[PendingResponseOut])
def pending_responses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Caller's unfinished responses in active cycles that are still open."""
    rows = (
        db.query(EvaluationResponse, EvaluationCycle, EvaluationForm, User)
        .join(EvaluationCycle, EvaluationCycle.id == EvaluationResponse.cycle_id)
        .join(EvaluationForm, EvaluationForm.id == EvaluationResponse.form_id)
        .join(User, User.id == EvaluationResponse.evaluated_user_id)
        .filter(
            EvaluationResponse.evaluator_id == current_user.id,
            EvaluationResponse.status.in_(
                [ResponseStatus.PENDING.value, ResponseStatus.IN_PROGRESS.value]
            ),
            EvaluationCycle.status == CycleStatus.ACTIVE.value,
            EvaluationCycle.end_date > date.today(),
        )
        .order_by(EvaluationCycle.end_date.asc())
        .all()
    )
    return [
        PendingResponseOut(
            **response_to_out(r).model_dump(),
            cycle_title=c.title,
            cycle_end_date=c.end_date.isoformat(),
            form_title=f.title,
            evaluated_user_name=u.full_name,
        )
        for r, c, f, u in rows
    ]
