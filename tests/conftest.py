"""
Pytest configuration and fixtures for teamcode tests.
"""

import os

# Keep the app's own engine off disk; tests use the engine below
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teamcode.core.database import get_db
from teamcode.core.notifier import ChangeNotifier
from teamcode.core.vcs import file_registry
from teamcode.main import app
from teamcode.models import Base, Member


# Test database URL (in-memory SQLite shared by every session)
TEST_DATABASE_URL = "sqlite://"

test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session on a fresh schema."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def events(notifier: ChangeNotifier) -> list:
    """Every event the notifier publishes during the test, in order."""
    received = []
    notifier.subscribe(received.append)
    return received


@pytest.fixture
def author(db_session) -> Member:
    member = Member(id=7, team_id=1, name="Ada Lovelace", email="ada@example.com")
    db_session.add(member)
    db_session.commit()
    return member


@pytest.fixture
def code_file(db_session, author):
    """Robot.java for team 1, seeded with one draft."""
    return file_registry.create_file(
        db_session,
        team_id=1,
        file_name="Robot.java",
        path="src/Robot.java",
        language="java",
        author_id=author.id,
        initial_content="// empty",
    )


@pytest.fixture(scope="function")
def client(db_session, notifier):
    """Create a test client bound to the test database and notifier."""
    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    previous_notifier = app.state.notifier
    app.state.notifier = notifier

    with TestClient(app) as test_client:
        yield test_client

    app.state.notifier = previous_notifier
    app.dependency_overrides.clear()
