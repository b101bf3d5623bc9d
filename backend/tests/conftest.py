"""Pytest fixtures: SQLite database per test, fixed clock, no catalog import."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("MUNICIPALITIES_IMPORT_ENABLED", "false")

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bulky_waste.clock import FixedClock, get_clock  # noqa: E402
from bulky_waste.database import Base, get_db  # noqa: E402
from bulky_waste.main import app  # noqa: E402
from bulky_waste.repositories.municipality_catalog import MunicipalityCatalog  # noqa: E402

# Import all models so they register with Base.metadata
from bulky_waste.models.municipality import Municipality  # noqa: F401,E402
from bulky_waste.models.reservation import Reservation    # noqa: F401,E402
from bulky_waste.models.state_change import StateChange   # noqa: F401,E402

SQLITE_URL = "sqlite:///./test.db"

# Monday 2025-03-10, 10:00 in Lisbon (WET, UTC+0)
TODAY_INSTANT = datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)
SEEDED_MUNICIPALITIES = ("Lisboa", "Porto")


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
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
def clock():
    return FixedClock(TODAY_INSTANT)


@pytest.fixture(scope="function")
def municipalities(db):
    """Seed the catalog with Lisboa and Porto."""
    catalog = MunicipalityCatalog(db)
    for name in SEEDED_MUNICIPALITIES:
        catalog.ensure(name)
    return catalog


@pytest.fixture(scope="function")
def client(session_factory, municipalities, clock):
    """FastAPI TestClient with the database and clock dependencies overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helper: create a booking via the API, returns the response JSON
# ---------------------------------------------------------------------------
def booking_payload(
    municipality: str = "Lisboa",
    requested_date: str = "2025-03-12",
    time_slot: str = "AFTERNOON",
    description: str = "Sofá",
) -> dict:
    return {
        "municipalityName": municipality,
        "description": description,
        "requestedDate": requested_date,
        "timeSlot": time_slot,
    }


def create_test_booking(client: TestClient, **kwargs) -> dict:
    """Helper: POST /api/bookings and return response JSON."""
    resp = client.post("/api/bookings", json=booking_payload(**kwargs))
    assert resp.status_code == 200, resp.text
    return resp.json()
