import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.results import load_completed_snapshots
from app.core.access import assert_can_view_results, get_user_or_404
from app.core.aggregation import build_scorecard
from app.core.audit import log_event
from app.core.classification import classify_low_score_categories
from app.core.config import settings
from app.core.errors import NotFound
from app.core.security import get_current_user, require_admin
from app.core.suggestions import SuggestionService
from app.core.text_generation import TextGenerator, get_text_generator
from app.db.session import get_db
from app.models.development_suggestion import DevelopmentSuggestion
from app.models.user import User
from app.schemas.suggestions import (
    DevelopmentSuggestionOut,
    QuestionGenerateOut,
    QuestionGenerateRequest,
    SuggestionReview,
)

router = APIRouter(tags=["development"])


def suggestion_to_out(s: DevelopmentSuggestion) -> DevelopmentSuggestionOut:
    return DevelopmentSuggestionOut(
        id=s.id,
        user_id=s.user_id,
        cycle_id=s.cycle_id,
        outcome=s.outcome,
        categories=s.categories or [],
        suggestions=s.suggestions or [],
        rejected_segments=s.rejected_segments or [],
        message=s.message,
        generated_at=s.generated_at,
        is_reviewed=s.is_reviewed,
        reviewer_comments=s.reviewer_comments,
        reviewed_by_user_id=s.reviewed_by_user_id,
        reviewed_at=s.reviewed_at,
    )


@router.post(
    "/development-suggestions/{user_id}",
    response_model=DevelopmentSuggestionOut,
    status_code=status.HTTP_201_CREATED,
)
def generate_development_suggestions(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    generator: TextGenerator = Depends(get_text_generator),
):
    """
    Classify the subject's pooled category means and ask the text generator
    for development suggestions on the low ones. When nothing is below the
    threshold the provider is not called and an affirmative message is stored.
    """
    assert_can_view_results(current_user, user_id)
    subject = get_user_or_404(db, user_id)

    snapshots = load_completed_snapshots(db, subject.id)
    if not snapshots:
        raise NotFound("No completed evaluations found")

    scorecard = build_scorecard(str(subject.id), snapshots)
    classification = classify_low_score_categories(scorecard.category_means)

    result = SuggestionService(generator).generate(subject.job_title, classification)

    s = DevelopmentSuggestion(
        user_id=subject.id,
        cycle_id=None,
        outcome=result.outcome.value,
        categories=[
            {"name": name, "score": scorecard.category_means[name]}
            for name in classification.categories
        ],
        suggestions=[item.model_dump() for item in result.suggestions],
        rejected_segments=[seg.model_dump() for seg in result.rejected_segments],
        message=result.message,
    )
    db.add(s)
    db.flush()

    log_event(
        db=db,
        actor=current_user,
        action="DEVELOPMENT_SUGGESTIONS_GENERATED",
        entity_type="development_suggestion",
        entity_id=s.id,
        metadata={
            "user_id": str(subject.id),
            "outcome": s.outcome,
            "categories": list(classification.categories),
            "rejected_segments": len(result.rejected_segments),
        },
    )

    db.commit()
    db.refresh(s)
    return suggestion_to_out(s)


@router.get("/development-suggestions/{user_id}", response_model=list[DevelopmentSuggestionOut])
def list_development_suggestions(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    assert_can_view_results(current_user, user_id)
    rows = (
        db.query(DevelopmentSuggestion)
        .filter(DevelopmentSuggestion.user_id == user_id)
        .order_by(DevelopmentSuggestion.generated_at.desc())
        .all()
    )
    return [suggestion_to_out(s) for s in rows]


@router.post("/development-suggestions/{suggestion_id}/review", response_model=DevelopmentSuggestionOut)
def review_development_suggestion(
    suggestion_id: uuid.UUID,
    payload: SuggestionReview,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    s = db.get(DevelopmentSuggestion, suggestion_id)
    if not s:
        raise NotFound("Development suggestion not found")

    s.is_reviewed = True
    s.reviewer_comments = payload.reviewer_comments
    s.reviewed_by_user_id = current_user.id
    s.reviewed_at = datetime.now(timezone.utc)
    db.flush()

    log_event(
        db=db,
        actor=current_user,
        action="DEVELOPMENT_SUGGESTIONS_REVIEWED",
        entity_type="development_suggestion",
        entity_id=s.id,
        metadata={"user_id": str(s.user_id)},
    )

    db.commit()
    db.refresh(s)
    return suggestion_to_out(s)


@router.post("/questions/generate", response_model=QuestionGenerateOut)
def generate_questions(
    payload: QuestionGenerateRequest,
    _: User = Depends(get_current_user),
    generator: TextGenerator = Depends(get_text_generator),
):
    return SuggestionService(generator).generate_questions(
        payload.job_title,
        payload.evaluation_type,
        scale_min=settings.RATING_SCALE_MIN,
        scale_max=settings.RATING_SCALE_MAX,
    )
