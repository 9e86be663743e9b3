"""Pytest fixtures — SQLite database per test, recreated for isolation."""
import uuid
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from portal.database import Base, get_db
from portal.main import app

# Import all models so they register with Base.metadata
from portal.models.client import Client                                # noqa: F401
from portal.models.staff import Department, Role, StaffProfile
from portal.models.event_request import EventRequest                   # noqa: F401
from portal.models.status_history import EventRequestStatusHistory     # noqa: F401

SQLITE_URL = "sqlite:///./test.db"

DEPARTMENT_BY_ROLE = {
    Role.CUSTOMER_SERVICE: Department.CUSTOMER_SERVICE,
    Role.SENIOR_CUSTOMER_SERVICE: Department.CUSTOMER_SERVICE,
    Role.FINANCIAL_MANAGER: Department.FINANCE,
    Role.ADMINISTRATION_MANAGER: Department.ADMINISTRATION,
    Role.PRODUCTION_MANAGER: Department.PRODUCTION,
    Role.SERVICE_MANAGER: Department.SERVICE,
    Role.HR: Department.HR,
}


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # WAL lets a second session read while another one writes
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def staff(session_factory):
    """Seed one staff member per role; returns {Role: staff_id}."""
    session = session_factory()
    ids = {}
    try:
        for role, department in DEPARTMENT_BY_ROLE.items():
            profile = StaffProfile(
                id=str(uuid.uuid4()),
                email=f"{role.value.lower()}@example.com",
                username=role.value.replace("_", " ").title(),
                department=department,
                role=role,
                permissions=["home"],
            )
            session.add(profile)
            ids[role] = profile.id
        session.commit()
    finally:
        session.close()
    return ids


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: create records via the API, return the response JSON
# ---------------------------------------------------------------------------
def create_test_client(client: TestClient, name: str = "Acme Weddings") -> dict:
    """Helper — POST /api/clients and return response JSON."""
    resp = client.post("/api/clients/", json={"name": name, "email": "events@acme.test"})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_request(client: TestClient, actor_id: str, client_id: int, **overrides) -> dict:
    """Helper — POST /api/event-requests and return response JSON."""
    body = {
        "client_id": client_id,
        "event_type": "WEDDING",
        "start_time": "2026-12-05T15:00:00Z",
        "finish_time": "2026-12-05T23:00:00Z",
        "location": "Grand Hall",
        "preferences": ["DECORATION", "DINNER"],
        "note": "Outdoor ceremony if weather allows",
    }
    body.update(overrides)
    resp = client.post(f"/api/event-requests/?actor_id={actor_id}", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()
