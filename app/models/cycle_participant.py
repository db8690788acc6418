import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, DateTime, String, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import ParticipantStatus, sql_in
from app.db.base import Base


class CycleParticipant(Base):
    __tablename__ = "cycle_participants"
    __table_args__ = (
        UniqueConstraint("cycle_id", "user_id", name="uq_cycle_participant"),
        CheckConstraint(f"status IN ({sql_in(ParticipantStatus)})", name="ck_cycle_participants_status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    cycle_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("evaluation_cycles.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ParticipantStatus.NOT_STARTED.value)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    cycle = relationship("EvaluationCycle", back_populates="participants")
