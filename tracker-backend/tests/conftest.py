# File: tests/conftest.py

"""
Shared fixtures.

The environment is pointed at a throwaway SQLite file and upload directory
before anything from ``tracker`` is imported, since settings are read once
at import time.
"""

import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="tracker-tests-"))

os.environ["DATABASE_URL"] = f"sqlite:///{(_TMP_DIR / 'test.db').as_posix()}"
os.environ["UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MAX_UPLOAD_SIZE_MB"] = "1"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tracker.core.security import create_access_token  # noqa: E402
from tracker.db.init_db import drop_db, init_db  # noqa: E402
from tracker.db.session import SessionLocal  # noqa: E402
from tracker.main import app  # noqa: E402
from tracker.models.user import User, UserRole  # noqa: E402
from tracker.services import user_service  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_schema():
    drop_db()
    init_db()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(name: str = None, role: UserRole = UserRole.member, password: str = "password123") -> User:
        counter["n"] += 1
        name = name or f"User {counter['n']}"
        email = f"{name.lower().replace(' ', '.')}.{counter['n']}@example.com"
        return user_service.create_user(db, name=name, email=email, password=password, role=role)

    return _make_user


@pytest.fixture
def admin(make_user) -> User:
    return make_user("Ada Admin", role=UserRole.admin)


@pytest.fixture
def member(make_user) -> User:
    return make_user("Mel Member")


@pytest.fixture
def outsider(make_user) -> User:
    return make_user("Otto Outsider")


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def admin_headers(admin) -> dict:
    return headers_for(admin)


@pytest.fixture
def member_headers(member) -> dict:
    return headers_for(member)


@pytest.fixture
def outsider_headers(outsider) -> dict:
    return headers_for(outsider)


@pytest.fixture
def project_payload(member) -> dict:
    return {
        "name": "Website Redesign",
        "description": "Q3 revamp",
        "startDate": "2024-01-01",
        "dueDate": "2024-03-01",
        "members": [member.id],
    }


@pytest.fixture
def project(client, admin_headers, project_payload) -> dict:
    resp = client.post("/api/projects", json=project_payload, headers=admin_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def auth_headers():
    return headers_for
