import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.audit import log_event
from app.core.enums import CycleStatus, ParticipantStatus
from app.core.security import get_current_user, require_admin
from app.db.session import get_db
from app.models.cycle_participant import CycleParticipant
from app.models.evaluation_cycle import EvaluationCycle
from app.models.user import User
from app.schemas.evaluation_cycle import CycleCreate, CycleOut, ParticipantOut, ParticipantsAdd

router = APIRouter(prefix="/cycles", tags=["evaluation-cycles"])


def to_out(c: EvaluationCycle) -> CycleOut:
    return CycleOut(
        id=c.id,
        title=c.title,
        description=c.description,
        start_date=c.start_date,
        end_date=c.end_date,
        status=c.status,
        target_departments=list(c.target_departments or []),
        participants=[ParticipantOut(user_id=p.user_id, status=p.status) for p in c.participants],
        created_by_user_id=c.created_by_user_id,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


def _get_cycle_or_404(db: Session, cycle_id: uuid.UUID) -> EvaluationCycle:
    c = db.get(EvaluationCycle, cycle_id)
    if not c:
        raise HTTPException(status_code=404, detail="Cycle not found")
    return c


def _add_participants(db: Session, cycle: EvaluationCycle, user_ids: list[uuid.UUID]) -> list[uuid.UUID]:
    """Attach users not already in the cycle; returns the ids actually added."""
    existing = {p.user_id for p in cycle.participants}
    wanted = [uid for uid in dict.fromkeys(user_ids) if uid not in existing]
    if not wanted:
        return []

    found = {u.id for u in db.query(User).filter(User.id.in_(wanted)).all()}
    missing = [str(uid) for uid in wanted if uid not in found]
    if missing:
        raise HTTPException(
            status_code=400,
            detail={"message": "Unknown participant users", "missing_ids": missing},
        )

    for uid in wanted:
        cycle.participants.append(
            CycleParticipant(user_id=uid, status=ParticipantStatus.NOT_STARTED.value)
        )
    return wanted


@router.get("", response_model=list[CycleOut])
def list_cycles(
    status: CycleStatus | None = Query(default=None, description="Filter by status (draft, active, completed)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Admins see every cycle; everyone else sees the cycles they take part in.
    """
    query = db.query(EvaluationCycle)
    if not current_user.is_admin:
        query = query.join(
            CycleParticipant, CycleParticipant.cycle_id == EvaluationCycle.id
        ).filter(CycleParticipant.user_id == current_user.id)

    if status:
        query = query.filter(EvaluationCycle.status == status.value)

    cycles = query.order_by(EvaluationCycle.start_date.desc()).all()
    return [to_out(c) for c in cycles]


@router.get("/{cycle_id}", response_model=CycleOut)
def get_cycle(
    cycle_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return to_out(_get_cycle_or_404(db, cycle_id))


@router.post("", response_model=CycleOut, status_code=status.HTTP_201_CREATED)
def create_cycle(
    payload: CycleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if payload.end_date <= payload.start_date:
        raise HTTPException(status_code=400, detail="End date must be after start date")

    c = EvaluationCycle(
        title=payload.title,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=CycleStatus.DRAFT.value,
        target_departments=list(payload.target_departments),
        created_by_user_id=current_user.id,
    )
    db.add(c)
    _add_participants(db, c, payload.participant_user_ids)
    db.flush()  # ensures c.id exists for audit

    log_event(
        db=db,
        actor=current_user,
        action="CYCLE_CREATED",
        entity_type="evaluation_cycle",
        entity_id=c.id,
        metadata={
            "title": payload.title,
            "start_date": str(payload.start_date),
            "end_date": str(payload.end_date),
            "participant_count": len(c.participants),
        },
    )

    db.commit()
    db.refresh(c)
    return to_out(c)


@router.post("/{cycle_id}/participants", response_model=CycleOut)
def add_participants(
    cycle_id: uuid.UUID,
    payload: ParticipantsAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    c = _get_cycle_or_404(db, cycle_id)
    if c.status == CycleStatus.COMPLETED.value:
        raise HTTPException(status_code=409, detail="Cannot add participants to a completed cycle")

    added = _add_participants(db, c, payload.user_ids)
    db.flush()

    log_event(
        db=db,
        actor=current_user,
        action="CYCLE_PARTICIPANTS_ADDED",
        entity_type="evaluation_cycle",
        entity_id=c.id,
        metadata={"user_ids": [str(uid) for uid in added]},
    )

    db.commit()
    db.refresh(c)
    return to_out(c)


def _transition(
    db: Session,
    *,
    cycle_id: uuid.UUID,
    actor: User,
    expected: CycleStatus,
    target: CycleStatus,
    action: str,
) -> CycleOut:
    c = (
        db.query(EvaluationCycle)
        .filter(EvaluationCycle.id == cycle_id)
        .with_for_update()
        .one_or_none()
    )
    if not c:
        raise HTTPException(status_code=404, detail="Cycle not found")

    if c.status == target.value:
        return to_out(c)
    if c.status != expected.value:
        raise HTTPException(
            status_code=409,
            detail=f"Only {expected.value} cycles can move to {target.value}",
        )

    prev = c.status
    c.status = target.value
    db.flush()

    log_event(
        db=db,
        actor=actor,
        action=action,
        entity_type="evaluation_cycle",
        entity_id=c.id,
        metadata={"from": prev, "to": c.status},
    )

    db.commit()
    db.refresh(c)
    return to_out(c)


@router.post("/{cycle_id}/activate", response_model=CycleOut)
def activate_cycle(
    cycle_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return _transition(
        db,
        cycle_id=cycle_id,
        actor=current_user,
        expected=CycleStatus.DRAFT,
        target=CycleStatus.ACTIVE,
        action="CYCLE_ACTIVATED",
    )


@router.post("/{cycle_id}/complete", response_model=CycleOut)
def complete_cycle(
    cycle_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return _transition(
        db,
        cycle_id=cycle_id,
        actor=current_user,
        expected=CycleStatus.ACTIVE,
        target=CycleStatus.COMPLETED,
        action="CYCLE_COMPLETED",
    )
