import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, ForeignKey, String, Float, UniqueConstraint, CheckConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from app.core.enums import RelationshipType, ResponseStatus, sql_in
from app.db.base import Base
from app.db.types import JSONType


class EvaluationResponse(Base):
    """
    One rater's answer set for one subject in one cycle/form.

    answers holds denormalized snapshots so the row stays readable if the
    form changes later:
      [{"question_id": "...", "question_text": "...", "category": "Leadership",
        "rating_value": 4, "text_value": null}]
    """
    __tablename__ = "evaluation_responses"
    __table_args__ = (
        UniqueConstraint(
            "cycle_id", "form_id", "evaluator_id", "evaluated_user_id",
            name="uq_evaluation_responses_tuple",
        ),
        CheckConstraint(
            f"status IN ({sql_in(ResponseStatus)})",
            name="ck_evaluation_responses_status",
        ),
        CheckConstraint(
            f"relationship_type IN ({sql_in(RelationshipType)})",
            name="ck_evaluation_responses_relationship",
        ),
        # Drafts are never scored or stamped
        CheckConstraint(
            "(status = 'completed') OR (average_score IS NULL AND submitted_at IS NULL)",
            name="ck_evaluation_responses_unscored_draft",
        ),
        # completed => submitted_at present
        CheckConstraint(
            "(status <> 'completed') OR (submitted_at IS NOT NULL)",
            name="ck_evaluation_responses_completed_ts",
        ),
        Index("ix_evaluation_responses_subject_status", "evaluated_user_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    cycle_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("evaluation_cycles.id", ondelete="CASCADE"),
        nullable=False,
    )
    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("evaluation_forms.id", ondelete="RESTRICT"),
        nullable=False,
    )
    evaluator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    evaluated_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )

    relationship_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ResponseStatus.PENDING.value)

    answers: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)

    # None until completed with at least one rating answer
    average_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    cycle = relationship("EvaluationCycle")
    form = relationship("EvaluationForm")
    evaluator = relationship("User", foreign_keys=[evaluator_id])
    evaluated_user = relationship("User", foreign_keys=[evaluated_user_id])
