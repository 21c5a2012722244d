import os
import tempfile

# Must be set before anything imports app.core.config
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="employee-manager-logs-"))

import pytest
from sqlalchemy.orm import Session

from app.main import app
from app.db.schema import initialize_schema
from app.db.session import get_db
from tests.helpers import make_sqlite_engine

engine = make_sqlite_engine()


@pytest.fixture(scope="session", autouse=True)
def create_test_schema():
    initialize_schema(engine)
    yield


@pytest.fixture()
def db_session():
    """
    Uses:
      - one outer transaction per test, rolled back at the end
      - a SAVEPOINT for every commit the application makes

    So route handlers can call session.commit() without leaking rows between tests.
    """
    connection = engine.connect()
    outer_tx = connection.begin()
    session = Session(bind=connection, join_transaction_mode="create_savepoint")

    try:
        yield session
    finally:
        session.close()
        outer_tx.rollback()
        connection.close()


@pytest.fixture()
def fresh_engine():
    """A private in-memory database with the schema in place, for code that commits."""
    e = make_sqlite_engine()
    initialize_schema(e)
    yield e
    e.dispose()


@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()
