"""
Tests for audit endpoints.
"""

from fastapi.testclient import TestClient
from app.main import app

from tests.helpers import create_user


def test_audit_requires_admin(db_session):
    create_user(db_session, "user@local.test", "User")

    client = TestClient(app)
    response = client.get("/audit", headers={"X-User-Email": "user@local.test"})
    assert response.status_code == 403


def test_list_audit_events_filtered_by_entity(db_session):
    """Creating a cycle leaves a CYCLE_CREATED event for that cycle"""
    create_user(db_session, "admin@local.test", "Admin", is_admin=True)

    client = TestClient(app)
    headers = {"X-User-Email": "admin@local.test"}
    created = client.post(
        "/cycles",
        headers=headers,
        json={"title": "Audit Cycle", "start_date": "2026-01-01", "end_date": "2026-03-01"},
    )
    assert created.status_code == 201
    cycle_id = created.json()["id"]

    response = client.get(
        f"/audit?entity_type=evaluation_cycle&entity_id={cycle_id}",
        headers=headers,
    )
    assert response.status_code == 200
    events = response.json()
    assert len(events) == 1
    assert events[0]["action"] == "CYCLE_CREATED"
    assert events[0]["entity_id"] == cycle_id
    assert events[0]["metadata"]["title"] == "Audit Cycle"


def test_audit_filter_by_action_and_actor(db_session):
    admin = create_user(db_session, "admin@local.test", "Admin", is_admin=True)

    client = TestClient(app)
    headers = {"X-User-Email": "admin@local.test"}
    created = client.post(
        "/cycles",
        headers=headers,
        json={"title": "Audit Cycle", "start_date": "2026-01-01", "end_date": "2026-03-01"},
    )
    client.post(f"/cycles/{created.json()['id']}/activate", headers=headers)

    response = client.get(f"/audit?action=CYCLE_ACTIVATED&actor_user_id={admin.id}", headers=headers)
    assert response.status_code == 200
    events = response.json()
    assert [e["action"] for e in events] == ["CYCLE_ACTIVATED"]
    assert events[0]["actor_user_id"] == str(admin.id)
    assert events[0]["metadata"] == {"from": "draft", "to": "active"}
