from __future__ import annotations

import os
import pathlib
import sys
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_SECRET = "test-signing-key-that-is-long-enough-0123456789"
# Importing the server builds the module-level app from the environment.
os.environ["JWT_SECRET"] = TEST_SECRET
os.environ["DATABASE_URL"] = "sqlite://"

import expense_tracker.models  # noqa: E402,F401  # Ensure models are registered with metadata
from expense_tracker import database, deps  # noqa: E402
from expense_tracker.config import Settings  # noqa: E402
from expense_tracker.database import Base  # noqa: E402
from expense_tracker.server import create_app  # noqa: E402

TODAY = date(2024, 1, 15)
TEST_SETTINGS = Settings(jwt_secret=TEST_SECRET, database_url="sqlite://")

app = create_app(TEST_SETTINGS)


@pytest.fixture(scope="session")
def engine():
    test_engine = database.build_engine(TEST_SETTINGS)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    TestingSessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[deps.get_today] = lambda: TODAY
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, email: str = "a@x.com", password: str = "password1", full_name: str = "A") -> dict:
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "full_name": full_name},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(client):
    return bearer(register(client)["token"])
