from datetime import date
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.enums import CycleStatus, QuestionKind, RelationshipType
from app.core.form_validation import validate_answers
from app.core.logging import configure_logging
from app.core.responses import ResponseKey, SqlResponseStore, record_response
from app.db.session import SessionLocal
from app.models.cycle_participant import CycleParticipant
from app.models.evaluation_cycle import EvaluationCycle
from app.models.evaluation_form import EvaluationForm
from app.models.form_question import FormQuestion
from app.models.user import User

QUESTIONS = [
    ("Leadership", "Sets a clear direction for the team", QuestionKind.RATING),
    ("Leadership", "Delegates work with enough context to succeed", QuestionKind.RATING),
    ("Communication", "Shares information early and clearly", QuestionKind.RATING),
    ("Teamwork", "Helps colleagues when they are blocked", QuestionKind.RATING),
    ("General", "What should this person keep doing?", QuestionKind.TEXT),
]

# relationship -> evaluator key -> ratings in QUESTIONS order (rating questions only)
RATINGS = {
    RelationshipType.SELF: {"subject": [4, 4, 4, 5]},
    RelationshipType.MANAGER: {"manager": [3, 2, 4, 3]},
    RelationshipType.PEER: {"peer1": [2, 3, 4, 2], "peer2": [3, 2, 5, 3]},
    RelationshipType.DIRECT_REPORT: {"report": [3, 3, 4, 4]},
}


def get_or_create_user(db: Session, email: str, full_name: str, is_admin_flag: bool = False, **profile) -> User:
    u = db.query(User).filter(User.email == email).one_or_none()
    if u:
        return u
    u = User(email=email, full_name=full_name, is_active=True, is_admin=is_admin_flag, **profile)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def get_or_create_form(db: Session, rel: RelationshipType, created_by_user_id) -> EvaluationForm:
    title = f"Demo 360 - {rel.label}"
    f = db.query(EvaluationForm).filter(EvaluationForm.title == title).one_or_none()
    if f:
        return f
    f = EvaluationForm(title=title, evaluation_type=rel.value, created_by_user_id=created_by_user_id)
    for idx, (category, text, kind) in enumerate(QUESTIONS, start=1):
        f.questions.append(FormQuestion(position=idx, text=text, category=category, kind=kind.value))
    db.add(f)
    db.commit()
    db.refresh(f)
    return f


def get_or_create_cycle(db: Session, title: str, created_by_user_id, user_ids) -> EvaluationCycle:
    c = db.query(EvaluationCycle).filter(EvaluationCycle.title == title).one_or_none()
    if c:
        return c
    c = EvaluationCycle(
        title=title,
        start_date=date.today().replace(month=1, day=1),
        end_date=date(date.today().year + 1, 1, 1),
        status=CycleStatus.ACTIVE.value,
        created_by_user_id=created_by_user_id,
    )
    for uid in user_ids:
        c.participants.append(CycleParticipant(user_id=uid))
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def main():
    configure_logging(settings.LOG_LEVEL)
    db = SessionLocal()
    try:
        # ---- Users ----
        admin = get_or_create_user(db, "admin@local.test", "Admin Local", is_admin_flag=True)
        manager = get_or_create_user(db, "manager@local.test", "Morgan Manager", job_title="Engineering Manager")
        subject = get_or_create_user(
            db, "subject@local.test", "Sam Subject",
            job_title="Software Engineer", department="Engineering", manager_id=manager.id,
        )
        users = {
            "subject": subject,
            "manager": manager,
            "peer1": get_or_create_user(db, "peer1@local.test", "Pat Peer"),
            "peer2": get_or_create_user(db, "peer2@local.test", "Robin Peer"),
            "report": get_or_create_user(db, "report@local.test", "Riley Report", manager_id=subject.id),
        }

        # ---- Forms + cycle ----
        forms = {rel: get_or_create_form(db, rel, admin.id) for rel in RelationshipType}
        cycle = get_or_create_cycle(
            db, "Demo 360 Cycle", admin.id, [u.id for u in users.values()]
        )

        # ---- Responses (re-running overwrites, never duplicates) ----
        store = SqlResponseStore(db)
        for rel, by_evaluator in RATINGS.items():
            form = forms[rel]
            rating_questions = [q for q in form.questions if q.kind == QuestionKind.RATING.value]
            text_question = next(q for q in form.questions if q.kind == QuestionKind.TEXT.value)
            for evaluator_key, ratings in by_evaluator.items():
                evaluator = users[evaluator_key]
                raw = [{"question_id": q.id, "rating_value": v} for q, v in zip(rating_questions, ratings)]
                raw.append({"question_id": text_question.id, "text_value": "Keep sharing context early."})
                record_response(
                    store=store,
                    key=ResponseKey(
                        cycle_id=cycle.id,
                        form_id=form.id,
                        evaluator_id=evaluator.id,
                        evaluated_user_id=subject.id,
                    ),
                    relationship_type=rel.value,
                    answers=validate_answers(form=form, answers=raw),
                )
        db.commit()

        print("\n=== Demo Seed Complete ===")
        print("Users (use as X-User-Email header):")
        print(f"  admin:   {admin.email}")
        for key, u in users.items():
            print(f"  {key:<8} {u.email}")

        print("\nCycle:")
        print(f"  cycle_id: {cycle.id}")
        print(f"  title:    {cycle.title}")
        print(f"  status:   {cycle.status}")

        print("\nNext actions:")
        print(f"  1) Scorecard:          GET /results/{subject.id}")
        print(f"  2) Report:             GET /results/{subject.id}/report")
        print(f"  3) Development areas:  GET /results/{subject.id}/development-areas")
        print(f"  4) Suggestions:        POST /development-suggestions/{subject.id}")
        print()

    finally:
        db.close()


if __name__ == "__main__":
    main()
