from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db)):
    # DB ping; raises (500) if the database is unreachable
    db.execute(text("SELECT 1"))
    return {
        "status": "ok",
        "env": settings.APP_ENV,
        "database": db.get_bind().dialect.name,
        "text_generation": "configured" if settings.TEXT_GENERATION_URL else "disabled",
    }
