import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from app.core.enums import RelationshipType, sql_in
from app.db.base import Base


class EvaluationForm(Base):
    __tablename__ = "evaluation_forms"
    __table_args__ = (
        CheckConstraint(
            f"evaluation_type IN ({sql_in(RelationshipType)})",
            name="ck_evaluation_forms_type",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    evaluation_type: Mapped[str] = mapped_column(String(20), nullable=False)

    # Job title this form applies to (None = any role)
    target_role: Mapped[str | None] = mapped_column(String(200), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_by_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    questions = relationship(
        "FormQuestion",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="FormQuestion.position",
        lazy="selectin",
    )
