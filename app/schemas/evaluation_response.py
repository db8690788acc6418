import uuid
from datetime import datetime
from pydantic import BaseModel, Field


class AnswerIn(BaseModel):
    question_id: uuid.UUID
    rating_value: float | None = None
    text_value: str | None = Field(default=None, max_length=5000)


class AnswerSnapshot(BaseModel):
    """Answer as stored on a response: question text/category copied from the form."""
    question_id: str
    question_text: str
    category: str
    rating_value: float | None = None
    text_value: str | None = None


class ResponseSubmit(BaseModel):
    cycle_id: uuid.UUID
    form_id: uuid.UUID
    evaluated_user_id: uuid.UUID
    # kept as str so unknown values surface as a domain validation error
    relationship_type: str
    answers: list[AnswerIn] = Field(default_factory=list)
    status: str | None = None  # defaults to completed


class ResponseOut(BaseModel):
    id: uuid.UUID
    cycle_id: uuid.UUID
    form_id: uuid.UUID
    evaluator_id: uuid.UUID
    evaluated_user_id: uuid.UUID
    relationship_type: str
    status: str
    answers: list[AnswerSnapshot]
    average_score: float | None
    submitted_at: datetime | None
    created_at: datetime
    updated_at: datetime


class PendingResponseOut(ResponseOut):
    cycle_title: str
    cycle_end_date: str
    form_title: str
    evaluated_user_name: str
