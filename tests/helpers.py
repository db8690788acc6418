from datetime import date, datetime, timedelta, timezone
from sqlalchemy.orm import Session

from app.core.enums import CycleStatus, QuestionKind, RelationshipType, ResponseStatus
from app.core.scoring import average_score
from app.models.cycle_participant import CycleParticipant
from app.models.evaluation_cycle import EvaluationCycle
from app.models.evaluation_form import EvaluationForm
from app.models.form_question import FormQuestion
from app.models.user import User
from app.schemas.scorecard import ResponseSnapshot


def create_user(db, email: str, full_name="User", is_admin=False, **profile) -> User:
    u = User(email=email, full_name=full_name, is_active=True, is_admin=is_admin, **profile)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def create_form(
    db: Session,
    *,
    created_by: User,
    evaluation_type: RelationshipType = RelationshipType.PEER,
    title: str = "Peer Form",
    questions: list[dict] | None = None,
    is_active: bool = True,
) -> EvaluationForm:
    """
    questions example:
      [{"category": "Leadership", "text": "Sets direction"},
       {"category": "General", "text": "Comments", "kind": "text"}]
    """
    if questions is None:
        questions = [
            {"category": "Leadership", "text": "Sets direction"},
            {"category": "Teamwork", "text": "Helps others"},
        ]
    form = EvaluationForm(
        title=title,
        evaluation_type=evaluation_type.value,
        is_active=is_active,
        created_by_user_id=created_by.id,
    )
    for idx, q in enumerate(questions, start=1):
        form.questions.append(
            FormQuestion(
                position=idx,
                text=q["text"],
                category=q["category"],
                kind=q.get("kind", QuestionKind.RATING.value),
                rating_min=q.get("rating_min", 1),
                rating_max=q.get("rating_max", 5),
            )
        )
    db.add(form)
    db.commit()
    db.refresh(form)
    return form


def create_cycle(
    db,
    created_by: User,
    status=CycleStatus.ACTIVE.value,
    title="Annual 360",
    start_date: date | None = None,
    participants: list[User] | None = None,
) -> EvaluationCycle:
    start = start_date or date.today() - timedelta(days=10)
    c = EvaluationCycle(
        title=title,
        start_date=start,
        end_date=start + timedelta(days=60),
        status=status,
        created_by_user_id=created_by.id,
    )
    for u in participants or []:
        c.participants.append(CycleParticipant(user_id=u.id))
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def rating_answers(form: EvaluationForm, *ratings) -> list[dict]:
    """Request payload answers for the form's rating questions, in position order."""
    qs = [q for q in form.questions if q.kind == QuestionKind.RATING.value]
    return [{"question_id": str(q.id), "rating_value": v} for q, v in zip(qs, ratings)]


def submit(client, evaluator: User, *, cycle, form, subject: User, answers, relationship_type=None, status=None):
    body = {
        "cycle_id": str(cycle.id),
        "form_id": str(form.id),
        "evaluated_user_id": str(subject.id),
        "relationship_type": relationship_type or form.evaluation_type,
        "answers": answers,
    }
    if status is not None:
        body["status"] = status
    return client.post("/responses", json=body, headers={"X-User-Email": evaluator.email})


def snap(response_id, rel, ratings, *, cycle_id="c1", category="Leadership", status="completed", average="auto", evaluator="Rater"):
    """In-memory ResponseSnapshot; average defaults to the calculator's value for completed rows."""
    answers = [
        {"question_id": f"{response_id}-{i}", "question_text": "Q", "category": category, "rating_value": v}
        for i, v in enumerate(ratings)
    ]
    if average == "auto":
        average = average_score(answers) if status == ResponseStatus.COMPLETED.value else None
    return ResponseSnapshot(
        response_id=response_id,
        cycle_id=cycle_id,
        cycle_title=f"Cycle {cycle_id}",
        cycle_start=date(2026, 1, 1),
        cycle_end=date(2026, 3, 1),
        form_title="Form",
        evaluator_name=evaluator,
        relationship_type=rel,
        status=status,
        average_score=average,
        answers=answers,
        submitted_at=datetime(2026, 2, 1, tzinfo=timezone.utc) if status == "completed" else None,
    )


class FakeGenerator:
    """Canned TextGenerator; records every prompt it receives."""

    def __init__(self, reply: str = ""):
        self.reply = reply
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, prompt: str) -> str:
        self.calls.append((system_prompt, prompt))
        return self.reply
