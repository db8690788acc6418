import uuid

from sqlalchemy import ForeignKey, UniqueConstraint, CheckConstraint, Integer, String, Float, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import QuestionKind, sql_in
from app.db.base import Base


class FormQuestion(Base):
    __tablename__ = "form_questions"
    __table_args__ = (
        UniqueConstraint("form_id", "position", name="uq_form_question_position"),
        CheckConstraint(f"kind IN ({sql_in(QuestionKind)})", name="ck_form_questions_kind"),
        CheckConstraint("rating_min < rating_max", name="ck_form_questions_bounds"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("evaluation_forms.id", ondelete="CASCADE"),
        nullable=False,
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False)

    text: Mapped[str] = mapped_column(String(1000), nullable=False)
    # free-form label, e.g. "Leadership"; copied onto answers at submit time
    category: Mapped[str] = mapped_column(String(120), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False, default=QuestionKind.RATING.value)

    rating_min: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    rating_max: Mapped[float] = mapped_column(Float, nullable=False, default=5)

    form = relationship("EvaluationForm", back_populates="questions")
