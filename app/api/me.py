from fastapi import APIRouter, Depends

from app.core.security import get_current_user
from app.models.user import User

router = APIRouter(tags=["auth"])


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    """Current user profile (dev auth)"""
    return {
        "id": str(current_user.id),
        "email": current_user.email,
        "full_name": current_user.full_name,
        "job_title": current_user.job_title,
        "department": current_user.department,
        "is_admin": current_user.is_admin,
        "is_active": current_user.is_active,
    }
