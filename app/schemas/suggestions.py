import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.core.enums import ClassificationOutcome, QuestionKind, RelationshipType


class SuggestionItem(BaseModel):
    category: str
    skill_building: str
    resource: str | None = None
    application: str | None = None


class GeneratedQuestion(BaseModel):
    category: str
    text: str
    kind: QuestionKind
    rating_min: float | None = None
    rating_max: float | None = None


class RejectedSegment(BaseModel):
    """A block of generated text that did not match the line grammar."""
    line: int  # 1-based line where the block starts
    text: str
    reason: str


class CategoryScore(BaseModel):
    name: str
    score: float


class SuggestionResult(BaseModel):
    outcome: ClassificationOutcome
    categories: list[str]
    suggestions: list[SuggestionItem] = Field(default_factory=list)
    rejected_segments: list[RejectedSegment] = Field(default_factory=list)
    message: str | None = None


class DevelopmentSuggestionOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    cycle_id: uuid.UUID | None
    outcome: ClassificationOutcome
    categories: list[CategoryScore]
    suggestions: list[SuggestionItem]
    rejected_segments: list[RejectedSegment]
    message: str | None
    generated_at: datetime
    is_reviewed: bool
    reviewer_comments: str | None
    reviewed_by_user_id: uuid.UUID | None
    reviewed_at: datetime | None


class SuggestionReview(BaseModel):
    reviewer_comments: str | None = Field(default=None, max_length=5000)


class QuestionGenerateRequest(BaseModel):
    job_title: str = Field(min_length=1, max_length=200)
    evaluation_type: RelationshipType


class QuestionGenerateOut(BaseModel):
    questions: list[GeneratedQuestion]
    rejected_segments: list[RejectedSegment]
