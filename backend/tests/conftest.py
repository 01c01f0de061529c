"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read at import time: point them at an in-memory database and
# keep the lifespan from creating tables or seeding before the fixtures do.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_POPULATE", "false")
os.environ.setdefault("MAIL_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auto_api.main import app
from auto_api.models import Auto, Base
from auto_api.seed import seed
from shared.infrastructure.db import get_db
from shared.security.auth import sign_jwt


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    """SQLite only enforces foreign keys when asked to."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class RecordingNotifier:
    """Notifier double that remembers every notification."""

    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    def notify(self, subject: str, body: str) -> None:
        if self.fail:
            raise ConnectionError("SMTP server unreachable")
        self.sent.append((subject, body))


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seed_autos(db_session) -> list[Auto]:
    """The demo Autos (ids 1 to 5), ordered by id."""
    seed(db_session)
    return list(db_session.scalars(select(Auto).order_by(Auto.id)))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    """Notifier whose every delivery fails."""
    return RecordingNotifier(fail=True)


def bearer(username: str, roles: list[str]) -> dict[str, str]:
    token = sign_jwt({"sub": username, "roles": roles})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    """Authorization header of an admin (may delete)."""
    return bearer("admin", ["admin", "user"])


@pytest.fixture
def user_headers():
    """Authorization header of a plain user (may create and update)."""
    return bearer("user", ["user"])


@pytest.fixture
def guest_headers():
    """Authorization header of a principal without any known role."""
    return bearer("guest", ["guest"])


@pytest.fixture
def auto_payload():
    """Factory for the JSON body of a valid new Auto."""

    def _payload(**overrides) -> dict:
        payload = {
            "chassisNumber": "WAUZZZ8V0KA000006",
            "make": "Audi",
            "model": "A3",
            "modelYear": 2022,
            "category": "LIMOUSINE",
            "price": "31990.00",
            "safetyFeatures": ["ABS", "AIRBAG"],
            "engine": {
                "name": "Beta",
                "horsepower": 150,
                "cylinders": 6,
                "ratedSpeed": "1500.8",
            },
            "repairs": [
                {"cost": "199.99", "mechanic": "Uwe Kühn", "date": "2023-05-04"},
            ],
        }
        payload.update(overrides)
        return payload

    return _payload
