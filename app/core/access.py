import uuid

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models.user import User


def get_user_or_404(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def assert_can_view_results(user: User, subject_user_id: uuid.UUID):
    if not user.is_admin and user.id != subject_user_id:
        raise HTTPException(status_code=403, detail="Not authorized to view these results")
