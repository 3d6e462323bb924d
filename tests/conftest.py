"""
Shared pytest fixtures for the indent tracker test suite.

Provides:
    - engine: in-memory SQLite engine with all tables (function-scoped)
    - db_session: ORM session on that engine
    - client: FastAPI TestClient with get_db pointed at the test engine
    - user / auth_headers: a registered caller and its bearer header
    - upload_dir: the temporary blob store root
"""

import os
import tempfile

# Configuration is read at import time, so the environment goes first.
_UPLOAD_DIR = tempfile.mkdtemp(prefix="indent-uploads-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["UPLOAD_DIR"] = _UPLOAD_DIR
for _var in ("AT_USERNAME", "AT_API_KEY", "AT_FROM",
             "AFRICASTALKING_USERNAME", "AFRICASTALKING_APIKEY", "AFRICASTALKING_FROM"):
    os.environ.pop(_var, None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from indent_tracker import models
from indent_tracker.database import Base, get_db
from indent_tracker.main import app
from indent_tracker.utils import create_jwt


# ── DB fixtures ──────────────────────────────────────────────────────────


@pytest.fixture()
def engine():
    """Fresh in-memory database per test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# ── App fixtures ─────────────────────────────────────────────────────────


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def upload_dir():
    return _UPLOAD_DIR


@pytest.fixture()
def user(db_session):
    u = models.User(phone="+256700000001", full_name="Store Keeper", role="staff")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture()
def auth_headers(user):
    token = create_jwt({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


# ── Convenience fixtures ─────────────────────────────────────────────────


INDENT_PAYLOAD = {
    "machine_name": "Lathe #3",
    "department": "Production",
    "problem": "Spindle vibrates above 800 rpm",
    "priority": "High",
    "expected_delivery_days": 3,
}


@pytest.fixture()
def indent_payload():
    return dict(INDENT_PAYLOAD)


@pytest.fixture()
def indent(client, auth_headers, indent_payload):
    """Create and return an indent via the API."""
    res = client.post("/indents/", json=indent_payload, headers=auth_headers)
    assert res.status_code == 201
    return res.json()
