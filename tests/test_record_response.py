from datetime import datetime, timezone

import pytest

from app.core.errors import ValidationFailed
from app.core.responses import ResponseKey, SqlResponseStore, record_response
from app.models.evaluation_response import EvaluationResponse

from tests.helpers import create_cycle, create_form, create_user


def _key(db):
    admin = create_user(db, "admin@local.test", "Admin", is_admin=True)
    subject = create_user(db, "subject@local.test", "Subject")
    peer = create_user(db, "peer@local.test", "Peer")
    form = create_form(db, created_by=admin)
    cycle = create_cycle(db, created_by=admin)
    return ResponseKey(cycle_id=cycle.id, form_id=form.id, evaluator_id=peer.id, evaluated_user_id=subject.id)


def _answers(*ratings):
    return [
        {"question_id": f"q{i}", "question_text": "Q", "category": "Leadership", "rating_value": v}
        for i, v in enumerate(ratings)
    ]


def test_record_creates_then_overwrites(db_session):
    key = _key(db_session)
    store = SqlResponseStore(db_session)

    first = record_response(store=store, key=key, relationship_type="peer", answers=_answers(2, 2))
    db_session.commit()
    second = record_response(store=store, key=key, relationship_type="peer", answers=_answers(5, 3))
    db_session.commit()

    assert first.id == second.id
    assert second.average_score == 4.0
    assert db_session.query(EvaluationResponse).count() == 1


def test_store_reports_created_flag(db_session):
    key = _key(db_session)
    store = SqlResponseStore(db_session)
    values = dict(relationship_type="peer", answers=_answers(3), status="completed",
                  average_score=3.0, submitted_at=datetime.now(timezone.utc))

    _, created = store.upsert(key, **values)
    _, created_again = store.upsert(key, **values)
    assert created is True
    assert created_again is False


def test_submitted_at_uses_given_clock(db_session):
    key = _key(db_session)
    now = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
    row = record_response(
        store=SqlResponseStore(db_session), key=key, relationship_type="peer", answers=_answers(4), now=now
    )
    assert row.submitted_at == now


def test_unknown_status_is_rejected(db_session):
    key = _key(db_session)
    with pytest.raises(ValidationFailed):
        record_response(
            store=SqlResponseStore(db_session), key=key, relationship_type="peer",
            answers=_answers(4), status="archived",
        )


class _RacingStore(SqlResponseStore):
    """Misses the row on the first lookup, as if another writer inserted it meanwhile."""

    def __init__(self, db):
        super().__init__(db)
        self.lookups = 0

    def find_by_tuple(self, key, *, lock=False):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return super().find_by_tuple(key, lock=lock)


def test_concurrent_first_insert_overwrites_winner(db_session):
    key = _key(db_session)
    winner = record_response(store=SqlResponseStore(db_session), key=key, relationship_type="peer", answers=_answers(1, 1))
    db_session.commit()

    store = _RacingStore(db_session)
    row = record_response(store=store, key=key, relationship_type="peer", answers=_answers(5, 5))
    db_session.commit()

    assert store.lookups == 2
    assert row.id == winner.id
    assert row.average_score == 5.0
    assert db_session.query(EvaluationResponse).count() == 1
    assert db_session.get(EvaluationResponse, winner.id).answers[0]["rating_value"] == 5


def test_completed_resave_keeps_submitted_at(db_session):
    key = _key(db_session)
    store = SqlResponseStore(db_session)
    first_at = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
    later = datetime(2026, 5, 3, 9, 30, tzinfo=timezone.utc)

    record_response(store=store, key=key, relationship_type="peer", answers=_answers(2), now=first_at)
    db_session.commit()
    row = record_response(store=store, key=key, relationship_type="peer", answers=_answers(4), now=later)
    db_session.commit()

    assert row.average_score == 4.0
    assert row.submitted_at.replace(tzinfo=timezone.utc) == first_at


def test_draft_to_completed_stamps_submission_time(db_session):
    key = _key(db_session)
    store = SqlResponseStore(db_session)
    done_at = datetime(2026, 5, 3, 9, 30, tzinfo=timezone.utc)

    draft = record_response(store=store, key=key, relationship_type="peer", answers=_answers(2), status="in_progress")
    db_session.commit()
    assert draft.submitted_at is None

    row = record_response(store=store, key=key, relationship_type="peer", answers=_answers(4), now=done_at)
    db_session.commit()
    assert row.submitted_at.replace(tzinfo=timezone.utc) == done_at
