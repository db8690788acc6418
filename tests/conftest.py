import os

# Must be set before app.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_dimensions360.db")
os.environ.setdefault("ENV_FILE", os.devnull)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.db.base import Base
from app.db.session import engine, get_db
from app.core.text_generation import get_text_generator
from tests.helpers import FakeGenerator

TestingSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    join_transaction_mode="create_savepoint",
)


@pytest.fixture(scope="session", autouse=True)
def create_test_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    """
    Uses:
      - one outer transaction per test
      - a SAVEPOINT for every session-level transaction inside it

    Application code can call session.commit()/rollback() freely; the outer
    transaction is rolled back when the test ends.
    """
    connection = engine.connect()
    outer_tx = connection.begin()

    session = TestingSessionLocal(bind=connection)

    try:
        yield session
    finally:
        session.close()
        outer_tx.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def fake_generator():
    gen = FakeGenerator()
    app.dependency_overrides[get_text_generator] = lambda: gen
    return gen


@pytest.fixture()
def client():
    return TestClient(app)
