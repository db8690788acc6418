from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()


@router.get("/")
def root():
    return {
        "name": "Dimensions 360 Feedback",
        "status": "ok",
        "env": settings.APP_ENV,
        "rating_scale": [settings.RATING_SCALE_MIN, settings.RATING_SCALE_MAX],
        "docs": "/docs",
        "health": "/health",
    }
