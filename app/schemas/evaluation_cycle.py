import uuid
from datetime import date, datetime
from pydantic import BaseModel, Field

from app.core.enums import CycleStatus, ParticipantStatus


class CycleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    start_date: date
    end_date: date
    target_departments: list[str] = Field(default_factory=list)
    participant_user_ids: list[uuid.UUID] = Field(default_factory=list)


class ParticipantsAdd(BaseModel):
    user_ids: list[uuid.UUID] = Field(min_length=1)


class ParticipantOut(BaseModel):
    user_id: uuid.UUID
    status: ParticipantStatus


class CycleOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    start_date: date
    end_date: date
    status: CycleStatus
    target_departments: list[str]
    participants: list[ParticipantOut]
    created_by_user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
