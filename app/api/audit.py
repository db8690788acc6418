import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.security import require_admin
from app.db.session import get_db
from app.models.audit_event import AuditEvent
from app.models.user import User

router = APIRouter(prefix="/audit", tags=["audit"])


def event_to_out(e: AuditEvent) -> dict:
    return {
        "id": str(e.id),
        "actor_user_id": str(e.actor_user_id) if e.actor_user_id else None,
        "action": e.action,
        "entity_type": e.entity_type,
        "entity_id": str(e.entity_id),
        "metadata": e.event_metadata,
        "created_at": e.created_at,
    }


@router.get("")
def list_audit_events(
    entity_type: str | None = Query(default=None, description="e.g. evaluation_response, evaluation_cycle"),
    entity_id: uuid.UUID | None = Query(default=None),
    action: str | None = Query(default=None, description="e.g. RESPONSE_RECORDED"),
    actor_user_id: uuid.UUID | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Newest first. Response submissions, cycle transitions and suggestion reviews all land here."""
    q = db.query(AuditEvent)

    if entity_type:
        q = q.filter(AuditEvent.entity_type == entity_type)
    if entity_id:
        q = q.filter(AuditEvent.entity_id == entity_id)
    if action:
        q = q.filter(AuditEvent.action == action)
    if actor_user_id:
        q = q.filter(AuditEvent.actor_user_id == actor_user_id)

    rows = q.order_by(AuditEvent.created_at.desc()).limit(limit).all()
    return [event_to_out(r) for r in rows]
