import os

# Keep the module-level engine in memory so importing the app never creates a file
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session  # noqa: E402

from db import create_db_and_tables, make_engine  # noqa: E402


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database with the journal tables."""
    engine = make_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(engine):
    """Create a test database session."""
    with Session(engine) as session:
        yield session
