from sqlalchemy.orm import Session
from typing import Any

import structlog

from app.models.audit_event import AuditEvent
from app.models.user import User

logger = structlog.get_logger(__name__)


def log_event(
    *,
    db: Session,
    actor: User | None,
    action: str,
    entity_type: str,
    entity_id,
    metadata: dict[str, Any] | None = None,
):
    event = AuditEvent(
        actor_user_id=actor.id if actor else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        event_metadata=metadata,
    )
    db.add(event)
    logger.info("audit.event", action=action, entity_type=entity_type, entity_id=str(entity_id))
