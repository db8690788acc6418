from datetime import date, datetime

from pydantic import BaseModel, Field

from app.core.enums import ClassificationOutcome, RelationshipType, ResponseStatus
from app.schemas.evaluation_response import AnswerSnapshot


class ResponseSnapshot(BaseModel):
    """Aggregation input: one stored response plus the display context it needs."""
    response_id: str
    cycle_id: str
    cycle_title: str = ""
    cycle_start: date | None = None
    cycle_end: date | None = None
    form_title: str = ""
    evaluator_name: str = ""
    relationship_type: str
    status: str = ResponseStatus.COMPLETED.value
    average_score: float | None = None
    answers: list[AnswerSnapshot] = Field(default_factory=list)
    submitted_at: datetime | None = None


class ScorecardEntry(BaseModel):
    response_id: str
    evaluator_name: str  # "Self" for self evaluations
    form_title: str
    average_score: float | None
    submitted_at: datetime | None


class CycleScorecard(BaseModel):
    cycle_id: str
    cycle_title: str
    start_date: date | None
    end_date: date | None
    # always holds the four relationship types, in enum order
    buckets: dict[RelationshipType, list[ScorecardEntry]]
    # only non-empty buckets with at least one scored response get a key
    bucket_averages: dict[RelationshipType, float]
    overall_average: float | None


class IntegrityIssue(BaseModel):
    response_id: str
    reason: str


class Scorecard(BaseModel):
    subject_user_id: str
    cycles: list[CycleScorecard]
    category_means: dict[str, float]
    integrity_issues: list[IntegrityIssue] = Field(default_factory=list)


class LowScoreClassification(BaseModel):
    outcome: ClassificationOutcome
    threshold: float
    categories: list[str]

    @property
    def no_development_areas(self) -> bool:
        return self.outcome == ClassificationOutcome.NO_DEVELOPMENT_AREAS
