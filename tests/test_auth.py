from datetime import datetime, timedelta

from jose import jwt

from peerlearn import config
from peerlearn.models import User

from .conftest import auth_header, signup


def test_signup_returns_user_and_token(client):
    user, token = signup(client, "Sam Student", "Sam@Example.com", "student")

    assert user["email"] == "sam@example.com"
    assert user["accountType"] == "student"
    assert "password" not in user
    assert token


def test_signup_creates_only_matching_role_details(client, admin):
    student, _ = signup(client, "Sam Student", "sam@example.com", "student")
    instructor, _ = signup(client, "Ivy Instructor", "ivy@example.com", "instructor")

    assert "studentDetails" in student and "instructorDetails" not in student
    assert student["studentDetails"]["enrolledCourses"] == []
    assert "instructorDetails" in instructor and "studentDetails" not in instructor
    assert instructor["instructorDetails"]["courses"] == []
    assert "studentDetails" not in admin[0] and "instructorDetails" not in admin[0]


def test_signup_refuses_admin_account_type(client, student, db):
    response = client.post(
        "/api/auth/signup",
        json={"name": "Mallory", "email": "mallory@example.com", "password": "secret123", "accountType": "admin"},
    )
    assert response.status_code == 400
    assert "accountType" in response.json()["details"]
    assert db.query(User).filter(User.email == "mallory@example.com").count() == 0

    # Without an admin token the password reset route stays closed.
    reset = client.post(f"/api/admin/users/{student[0]['id']}/reset-password", headers=auth_header(student[1]))
    assert reset.status_code == 403


def test_signup_reports_each_missing_field(client):
    response = client.post("/api/auth/signup", json={"email": "x@example.com"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "All fields are required"
    assert body["details"]["name"] == "Name is required"
    assert body["details"]["email"] is None
    assert body["details"]["accountType"] == "Account type is required"


def test_signup_rejects_unknown_account_type(client):
    response = client.post(
        "/api/auth/signup",
        json={"name": "Bob", "email": "bob@example.com", "password": "secret123", "accountType": "wizard"},
    )
    assert response.status_code == 400
    assert "accountType" in response.json()["details"]


def test_signup_rejects_duplicate_email(client):
    signup(client, "Sam Student", "sam@example.com", "student")
    response = client.post(
        "/api/auth/signup",
        json={"name": "Sam Again", "email": "SAM@example.com", "password": "secret123", "accountType": "student"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists"


def test_login_with_valid_credentials(client):
    signup(client, "Sam Student", "sam@example.com", "student")
    response = client.post("/api/auth/login", json={"email": "sam@example.com", "password": "secret123"})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["name"] == "Sam Student"
    assert body["token"]


def test_login_rejects_bad_password_and_unknown_email(client):
    signup(client, "Sam Student", "sam@example.com", "student")

    wrong = client.post("/api/auth/login", json={"email": "sam@example.com", "password": "nope-nope"})
    unknown = client.post("/api/auth/login", json={"email": "who@example.com", "password": "secret123"})

    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Invalid credentials"
    assert unknown.status_code == 400


def test_protected_route_requires_token(client):
    response = client.get("/api/users/profile")
    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied"


def test_invalid_token_is_rejected(client):
    response = client.get("/api/users/profile", headers=auth_header("not-a-jwt"))
    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_TOKEN"


def test_expired_token_is_rejected(client):
    user, _ = signup(client, "Sam Student", "sam@example.com", "student")
    expired = jwt.encode(
        {"user_id": user["id"], "role": "student", "exp": datetime.utcnow() - timedelta(minutes=1)},
        config.SECRET_KEY,
        algorithm=config.ALGORITHM,
    )

    response = client.get("/api/users/profile", headers=auth_header(expired))
    assert response.status_code == 401
    assert response.json()["code"] == "TOKEN_EXPIRED"


def test_password_reset_flow(client):
    signup(client, "Sam Student", "sam@example.com", "student")

    issued = client.post("/api/auth/forgot-password", json={"email": "sam@example.com"})
    assert issued.status_code == 200
    token = issued.json()["resetToken"]

    reset = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "brand-new"})
    assert reset.status_code == 200

    old = client.post("/api/auth/login", json={"email": "sam@example.com", "password": "secret123"})
    new = client.post("/api/auth/login", json={"email": "sam@example.com", "password": "brand-new"})
    assert old.status_code == 400
    assert new.status_code == 200

    reused = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "again-again"})
    assert reused.status_code == 400


def test_forgot_password_unknown_email(client):
    response = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 400


def test_logout(client, student):
    _, token = student
    response = client.post("/api/auth/logout", headers=auth_header(token))
    assert response.status_code == 200
