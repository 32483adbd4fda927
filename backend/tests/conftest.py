"""
Shared fixtures: an in-memory SQLite database and a TestClient.

The environment is set before anything under `app` is imported so the
engine is built against the in-memory database.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SWEEP_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.main import app

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # No context manager: skip the lifespan (tables come from _schema)
    return TestClient(app, raise_server_exceptions=False)


def register(client, user_type, username, password=PASSWORD, **extra):
    body = {"username": username, "password": password, "userType": user_type}
    if user_type != "user":
        body.setdefault("name", f"{username} name")
        body.setdefault("location", "Algiers")
        body.setdefault("phoneNumber", "0555000000")
    body.update(extra)
    return client.post("/api/auth/register", json=body)


def login(client, user_type, username, password=PASSWORD):
    resp = client.post(
        "/api/auth/login",
        json={"username": username, "password": password, "userType": user_type},
    )
    # Tests pass tokens explicitly; don't let the cookie jar authenticate for them
    client.cookies.clear()
    return resp


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client):
    """Register and log in; returns (headers, identity)."""

    def _signup(user_type, username):
        assert register(client, user_type, username).status_code == 201
        resp = login(client, user_type, username)
        assert resp.status_code == 200
        data = resp.json()["data"]
        return auth_headers(data["sessionId"]), data["user"]

    return _signup


@pytest.fixture
def pharmacy(signup):
    return signup("pharmacy", "p1")


@pytest.fixture
def supplier(signup):
    return signup("fournisseur", "s1")


@pytest.fixture
def consumer(signup):
    return signup("user", "u1")


@pytest.fixture
def aspirin(client, pharmacy):
    headers, _ = pharmacy
    resp = client.post("/api/medicines", json={"name": "Aspirin", "price": 5.00}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["data"]
