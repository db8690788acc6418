import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.access import assert_can_view_results, get_user_or_404
from app.core.aggregation import build_scorecard
from app.core.classification import classify_low_score_categories
from app.core.enums import ResponseStatus
from app.core.report import project_report
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.evaluation_cycle import EvaluationCycle
from app.models.evaluation_form import EvaluationForm
from app.models.evaluation_response import EvaluationResponse
from app.models.user import User
from app.schemas.report import ReportProjection
from app.schemas.scorecard import LowScoreClassification, ResponseSnapshot, Scorecard

router = APIRouter(prefix="/results", tags=["results"])


def load_completed_snapshots(db: Session, subject_user_id: uuid.UUID) -> list[ResponseSnapshot]:
    """Completed responses about subject, newest cycle first, in submission order."""
    rows = (
        db.query(EvaluationResponse, EvaluationCycle, EvaluationForm, User)
        .join(EvaluationCycle, EvaluationCycle.id == EvaluationResponse.cycle_id)
        .join(EvaluationForm, EvaluationForm.id == EvaluationResponse.form_id)
        .join(User, User.id == EvaluationResponse.evaluator_id)
        .filter(
            EvaluationResponse.evaluated_user_id == subject_user_id,
            EvaluationResponse.status == ResponseStatus.COMPLETED.value,
        )
        .order_by(
            EvaluationCycle.start_date.desc(),
            EvaluationCycle.id,
            EvaluationResponse.submitted_at.asc(),
        )
        .all()
    )
    return [
        ResponseSnapshot(
            response_id=str(r.id),
            cycle_id=str(c.id),
            cycle_title=c.title,
            cycle_start=c.start_date,
            cycle_end=c.end_date,
            form_title=f.title,
            evaluator_name=evaluator.full_name,
            relationship_type=r.relationship_type,
            status=r.status,
            average_score=r.average_score,
            answers=r.answers or [],
            submitted_at=r.submitted_at,
        )
        for r, c, f, evaluator in rows
    ]


def _scorecard_for(db: Session, user: User, subject_user_id: uuid.UUID) -> Scorecard:
    assert_can_view_results(user, subject_user_id)
    subject = get_user_or_404(db, subject_user_id)
    return build_scorecard(str(subject.id), load_completed_snapshots(db, subject.id))


@router.get("/{user_id}", response_model=Scorecard)
def get_scorecard(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _scorecard_for(db, current_user, user_id)


@router.get("/{user_id}/report", response_model=ReportProjection)
def get_report(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return project_report(_scorecard_for(db, current_user, user_id))


@router.get("/{user_id}/development-areas", response_model=LowScoreClassification)
def get_development_areas(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    scorecard = _scorecard_for(db, current_user, user_id)
    return classify_low_score_categories(scorecard.category_means)
