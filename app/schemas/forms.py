import uuid
from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from app.core.enums import QuestionKind, RelationshipType


class QuestionCreate(BaseModel):
    text: str = Field(min_length=1, max_length=1000)
    category: str = Field(min_length=1, max_length=120)
    kind: QuestionKind = QuestionKind.RATING
    rating_min: float = 1
    rating_max: float = 5

    @model_validator(mode="after")
    def _bounds(self):
        if self.rating_min >= self.rating_max:
            raise ValueError("rating_min must be lower than rating_max")
        return self


class QuestionOut(BaseModel):
    id: uuid.UUID
    position: int
    text: str
    category: str
    kind: QuestionKind
    rating_min: float
    rating_max: float


class FormCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    evaluation_type: RelationshipType
    target_role: str | None = Field(default=None, max_length=200)
    questions: list[QuestionCreate] = Field(min_length=1)


class FormOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    evaluation_type: RelationshipType
    target_role: str | None
    is_active: bool
    created_by_user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    questions: list[QuestionOut]
