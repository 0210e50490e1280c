import os
import shutil
import tempfile
from pathlib import Path

# Settings are read at import time, so point everything at a scratch dir first
TEST_ROOT = Path(tempfile.mkdtemp(prefix="campusvault-test-"))
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_ROOT / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(TEST_ROOT / "uploads")
os.environ["BACKUP_DIR"] = str(TEST_ROOT / "backups")
os.environ["LOG_DIR"] = str(TEST_ROOT / "logs")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BACKUP_SCHEDULE_ENABLED"] = "false"
os.environ["NORMALIZE_BRANCHES_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient

from campusvault.core.config import settings
from campusvault.core.database import Base, engine, SessionLocal
from campusvault.crud import user as user_crud
from campusvault.main import app

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture(autouse=True)
def clean_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    for directory in (settings.UPLOAD_DIR, settings.BACKUP_DIR):
        shutil.rmtree(directory, ignore_errors=True)
        Path(directory).mkdir(parents=True, exist_ok=True)
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


def make_user(db, username, is_admin=False, year=2, branch="CSE", password="password123"):
    return user_crud.create_user(
        db,
        username=username,
        email=f"{username}@college.edu",
        password=password,
        full_name=username.title(),
        year=year,
        branch=branch,
        is_admin=is_admin,
    )


def login(client, username, password="password123"):
    """Log in and return an Authorization header"""
    response = client.post("/api/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin", is_admin=True, year=4)


@pytest.fixture
def student(db):
    return make_user(db, "student")


@pytest.fixture
def admin_headers(client, admin):
    return login(client, "admin")


@pytest.fixture
def student_headers(client, student):
    return login(client, "student")


@pytest.fixture
def subject(client, admin_headers):
    response = client.post(
        "/api/subjects",
        json={"name": "Algorithms", "code": "CS201", "year": 2, "semester": 1, "branch": "CSE"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def upload(client, headers, subject_id, filename="ds-notes.pdf", content=PDF_BYTES,
           title="DS Notes", resource_type="notes"):
    return client.post(
        "/api/resources",
        data={"title": title, "description": "Unit 1-3", "resourceType": resource_type, "subjectId": subject_id},
        files={"file": (filename, content, "application/pdf")},
        headers=headers,
    )


@pytest.fixture
def resource(client, admin_headers, subject):
    response = upload(client, admin_headers, subject["id"])
    assert response.status_code == 201, response.text
    return response.json()["data"]
