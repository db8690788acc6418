from fastapi.testclient import TestClient

from app.main import app
from app.models.audit_event import AuditEvent

from tests.helpers import create_cycle, create_user


def _payload(**overrides):
    body = {
        "title": "2026 Annual 360",
        "start_date": "2026-01-01",
        "end_date": "2026-02-01",
        "target_departments": ["Engineering"],
    }
    body.update(overrides)
    return body


def test_create_cycle_requires_admin(db_session):
    create_user(db_session, "user@local.test")

    client = TestClient(app)
    r = client.post("/cycles", headers={"X-User-Email": "user@local.test"}, json=_payload())
    assert r.status_code == 403


def test_cycle_lifecycle(db_session):
    admin = create_user(db_session, "admin@local.test", "Admin", is_admin=True)
    member = create_user(db_session, "member@local.test", "Member")

    client = TestClient(app)
    headers = {"X-User-Email": "admin@local.test"}

    # create
    r = client.post("/cycles", headers=headers, json=_payload(participant_user_ids=[str(member.id)]))
    assert r.status_code == 201, r.text
    cycle = r.json()
    assert cycle["status"] == "draft"
    assert cycle["participants"] == [{"user_id": str(member.id), "status": "not_started"}]
    cycle_id = cycle["id"]

    # complete before activate is a conflict
    r = client.post(f"/cycles/{cycle_id}/complete", headers=headers)
    assert r.status_code == 409

    # activate (twice is a no-op)
    r = client.post(f"/cycles/{cycle_id}/activate", headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "active"
    r = client.post(f"/cycles/{cycle_id}/activate", headers=headers)
    assert r.status_code == 200

    # complete
    r = client.post(f"/cycles/{cycle_id}/complete", headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "completed"

    # no new participants once completed
    r = client.post(f"/cycles/{cycle_id}/participants", headers=headers, json={"user_ids": [str(admin.id)]})
    assert r.status_code == 409

    actions = [
        e.action
        for e in db_session.query(AuditEvent).filter(AuditEvent.entity_type == "evaluation_cycle").all()
    ]
    assert sorted(actions) == ["CYCLE_ACTIVATED", "CYCLE_COMPLETED", "CYCLE_CREATED"]


def test_end_date_must_follow_start_date(db_session):
    create_user(db_session, "admin@local.test", "Admin", is_admin=True)

    client = TestClient(app)
    r = client.post(
        "/cycles",
        headers={"X-User-Email": "admin@local.test"},
        json=_payload(start_date="2026-02-01", end_date="2026-02-01"),
    )
    assert r.status_code == 400


def test_unknown_participant_is_rejected(db_session):
    create_user(db_session, "admin@local.test", "Admin", is_admin=True)

    client = TestClient(app)
    missing = "00000000-0000-0000-0000-000000000001"
    r = client.post(
        "/cycles",
        headers={"X-User-Email": "admin@local.test"},
        json=_payload(participant_user_ids=[missing]),
    )
    assert r.status_code == 400
    assert r.json()["detail"]["missing_ids"] == [missing]


def test_add_participants_skips_existing(db_session):
    admin = create_user(db_session, "admin@local.test", "Admin", is_admin=True)
    a = create_user(db_session, "a@local.test", "A")
    b = create_user(db_session, "b@local.test", "B")
    cycle = create_cycle(db_session, created_by=admin, status="draft", participants=[a])

    client = TestClient(app)
    r = client.post(
        f"/cycles/{cycle.id}/participants",
        headers={"X-User-Email": "admin@local.test"},
        json={"user_ids": [str(a.id), str(b.id)]},
    )
    assert r.status_code == 200
    assert sorted(p["user_id"] for p in r.json()["participants"]) == sorted([str(a.id), str(b.id)])


def test_non_admin_sees_only_own_cycles(db_session):
    admin = create_user(db_session, "admin@local.test", "Admin", is_admin=True)
    member = create_user(db_session, "member@local.test", "Member")
    mine = create_cycle(db_session, created_by=admin, title="Mine", participants=[member])
    create_cycle(db_session, created_by=admin, title="Other")

    client = TestClient(app)
    r = client.get("/cycles", headers={"X-User-Email": "member@local.test"})
    assert r.status_code == 200
    assert [c["id"] for c in r.json()] == [str(mine.id)]

    r = client.get("/cycles?status=active", headers={"X-User-Email": "admin@local.test"})
    assert len(r.json()) == 2


def test_get_cycle_not_found(db_session):
    create_user(db_session, "user@local.test")
    client = TestClient(app)
    r = client.get("/cycles/00000000-0000-0000-0000-000000000000", headers={"X-User-Email": "user@local.test"})
    assert r.status_code == 404
