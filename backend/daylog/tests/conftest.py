"""
Shared fixtures: a throwaway SQLite database and a TestClient.
"""
import os
import tempfile

_TEST_DB_DIR = tempfile.mkdtemp(prefix="daylog-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TEST_DB_DIR, "test.db")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from daylog.db.base import Base
from daylog.db.session import engine, SessionLocal
from daylog.main import app
from daylog.models import User


@pytest.fixture(autouse=True)
def reset_database():
    """Start every test from empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    """Insert a user row directly and return its id."""
    def _make_user(username: str) -> int:
        user = User(username=username, password_hash="not-a-real-hash")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user.id
    return _make_user


def register(client, username: str, password: str = "testpassword123") -> dict:
    """Register through the API and return auth headers for the new user."""
    response = client.post(
        "/api/auth/register",
        json={"username": username, "password": password}
    )
    assert response.status_code == 201, response.text
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    return register(client, "alice")
