from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# Register every table on Base.metadata (create_all in tests, Alembic autogenerate)
from app.models import *  # noqa
