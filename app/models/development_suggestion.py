import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
import sqlalchemy as sa

from app.db.base import Base
from app.db.types import JSONType


class DevelopmentSuggestion(Base):
    __tablename__ = "development_suggestions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # None when built from responses pooled across every cycle
    cycle_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("evaluation_cycles.id", ondelete="SET NULL"), nullable=True
    )

    outcome: Mapped[str] = mapped_column(String(40), nullable=False)

    # [{"name": "Leadership", "score": 2.5}]
    categories: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    # [{"category", "skill_building", "resource", "application"}]
    suggestions: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    rejected_segments: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )

    is_reviewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reviewer_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
