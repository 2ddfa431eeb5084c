import os
import tempfile
from pathlib import Path

import pytest

# Point the app at a throwaway SQLite database before anything imports it
_TEST_DB = Path(tempfile.gettempdir()) / f"rapidaid_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB}"

from fastapi.testclient import TestClient  # noqa: E402

from database import Base, SessionLocal, engine  # noqa: E402
import models  # noqa: E402,F401


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from main import app
    return TestClient(app)


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    if _TEST_DB.exists():
        _TEST_DB.unlink()
