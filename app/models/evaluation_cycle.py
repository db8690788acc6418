import uuid
from datetime import datetime, date, timezone

from sqlalchemy import String, Date, DateTime, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from app.core.enums import CycleStatus, sql_in
from app.db.base import Base
from app.db.types import JSONType


class EvaluationCycle(Base):
    __tablename__ = "evaluation_cycles"
    __table_args__ = (
        CheckConstraint(
            f"status IN ({sql_in(CycleStatus)})",
            name="ck_evaluation_cycles_status",
        ),
        # Window is [start_date, end_date)
        CheckConstraint("end_date > start_date", name="ck_evaluation_cycles_window"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=CycleStatus.DRAFT.value)

    target_departments: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)

    created_by_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
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

    participants = relationship(
        "CycleParticipant",
        back_populates="cycle",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
