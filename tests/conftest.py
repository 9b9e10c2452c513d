import os
import tempfile

import pytest

# Settings are read at import time, so point them at scratch space first.
_TMP_DIR = tempfile.mkdtemp(prefix="peerlearn-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP_DIR, "test.db")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["MAIL_USERNAME"] = ""
os.environ["SEED_DEMO_DATA"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from peerlearn import accounts, config  # noqa: E402
from peerlearn.database import Base, SessionLocal, engine  # noqa: E402
from peerlearn.main import app  # noqa: E402


SAMPLE_SECTIONS = [
    {
        "title": "Getting Started",
        "lectures": [
            {"title": "Welcome", "videoUrl": "https://video.example/1", "duration": 10, "isPreview": True},
            {"title": "Setup", "videoUrl": "https://video.example/2", "duration": 20},
        ],
    },
    {
        "title": "Core Ideas",
        "lectures": [
            {"title": "State", "videoUrl": "https://video.example/3", "duration": 30},
            {"title": "Effects", "videoUrl": "https://video.example/4", "duration": 40},
        ],
    },
]


@pytest.fixture(autouse=True)
def reset_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
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


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def signup(client, name, email, account_type, password="secret123"):
    response = client.post(
        "/api/auth/signup",
        json={"name": name, "email": email, "password": password, "accountType": account_type},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], body["token"]


@pytest.fixture
def student(client):
    return signup(client, "Sam Student", "sam@example.com", "student")


@pytest.fixture
def other_student(client):
    return signup(client, "Olive Other", "olive@example.com", "student")


@pytest.fixture
def instructor(client):
    return signup(client, "Ivy Instructor", "ivy@example.com", "instructor")


@pytest.fixture
def admin(client, db):
    accounts.ensure_admin(db)
    response = client.post(
        "/api/auth/login",
        json={"email": config.ADMIN_EMAIL, "password": config.ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    return body["user"], body["token"]


def create_course(client, token, **overrides):
    payload = {
        "title": "Intro to React",
        "description": "Build modern web applications.",
        "thumbnail": "https://img.example/react.png",
        "price": 50,
        "category": "programming",
        "level": "beginner",
        "isPublished": True,
        "sections": SAMPLE_SECTIONS,
    }
    payload.update(overrides)
    response = client.post("/api/courses", json=payload, headers=auth_header(token))
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def course(client, instructor):
    return create_course(client, instructor[1])


def lecture_ids(course):
    return [lecture["id"] for section in course["sections"] for lecture in section["lectures"]]
