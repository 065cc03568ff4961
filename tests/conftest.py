"""Shared fixtures: in-memory database, session, HTTP client."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from box_organizer.database import configure_sqlite, get_db, init_db
from box_organizer.main import app
from box_organizer.schemas.workspace import WorkspaceCreate
from box_organizer.services import workspace_service


@pytest.fixture
def engine():
    """Provide a fresh in-memory SQLite engine with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    configure_sqlite(engine)
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Provide a session bound to the test engine."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """Provide a TestClient whose requests use the test engine."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def workspace(db):
    """Provide a workspace to create records in."""
    return workspace_service.create_workspace(db, WorkspaceCreate(name="Home"))


@pytest.fixture
def other_workspace(db):
    """Provide a second, unrelated workspace."""
    return workspace_service.create_workspace(db, WorkspaceCreate(name="Office"))
