import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.audit import log_event
from app.core.enums import RelationshipType
from app.core.security import get_current_user, require_admin
from app.db.session import get_db
from app.models.evaluation_form import EvaluationForm
from app.models.form_question import FormQuestion
from app.models.user import User
from app.schemas.forms import FormCreate, FormOut, QuestionOut

router = APIRouter(prefix="/forms", tags=["forms"])


def form_to_out(form: EvaluationForm) -> FormOut:
    return FormOut(
        id=form.id,
        title=form.title,
        description=form.description,
        evaluation_type=form.evaluation_type,
        target_role=form.target_role,
        is_active=form.is_active,
        created_by_user_id=form.created_by_user_id,
        created_at=form.created_at,
        updated_at=form.updated_at,
        questions=[
            QuestionOut(
                id=q.id,
                position=q.position,
                text=q.text,
                category=q.category,
                kind=q.kind,
                rating_min=q.rating_min,
                rating_max=q.rating_max,
            )
            for q in form.questions
        ],
    )


@router.post("", response_model=FormOut, status_code=status.HTTP_201_CREATED)
def create_form(
    payload: FormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    form = EvaluationForm(
        title=payload.title,
        description=payload.description,
        evaluation_type=payload.evaluation_type.value,
        target_role=payload.target_role,
        is_active=True,
        created_by_user_id=current_user.id,
    )
    form.questions = [
        FormQuestion(
            position=idx,
            text=q.text,
            category=q.category,
            kind=q.kind.value,
            rating_min=q.rating_min,
            rating_max=q.rating_max,
        )
        for idx, q in enumerate(payload.questions, start=1)
    ]
    db.add(form)
    db.flush()

    log_event(
        db=db,
        actor=current_user,
        action="FORM_CREATED",
        entity_type="evaluation_form",
        entity_id=form.id,
        metadata={
            "title": form.title,
            "evaluation_type": form.evaluation_type,
            "question_count": len(form.questions),
        },
    )

    db.commit()
    db.refresh(form)
    return form_to_out(form)


@router.get("", response_model=list[FormOut])
def list_forms(
    evaluation_type: RelationshipType | None = Query(default=None, description="Filter by evaluation type"),
    active_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    q = db.query(EvaluationForm)
    if evaluation_type:
        q = q.filter(EvaluationForm.evaluation_type == evaluation_type.value)
    if active_only:
        q = q.filter(EvaluationForm.is_active.is_(True))
    rows = q.order_by(EvaluationForm.created_at.desc()).all()
    return [form_to_out(f) for f in rows]


@router.get("/{form_id}", response_model=FormOut)
def get_form(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    form = db.get(EvaluationForm, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Evaluation form not found")
    return form_to_out(form)
