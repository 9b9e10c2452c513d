from peerlearn import accounts, config
from peerlearn.models import User

from .conftest import auth_header


def test_admin_lists_users_by_type(client, admin, student, instructor):
    response = client.get("/api/admin/users", params={"accountType": "student"}, headers=auth_header(admin[1]))
    assert response.status_code == 200
    assert [u["email"] for u in response.json()["users"]] == ["sam@example.com"]

    everyone = client.get("/api/admin/users", headers=auth_header(admin[1])).json()
    assert everyone["count"] == 3


def test_admin_routes_reject_other_roles(client, student, instructor):
    for _, token in (student, instructor):
        assert client.get("/api/admin/users", headers=auth_header(token)).status_code == 403


def test_admin_deletes_instructor_and_their_courses(client, admin, instructor, course):
    response = client.delete(f"/api/admin/users/{instructor[0]['id']}", headers=auth_header(admin[1]))
    assert response.status_code == 200
    assert client.get(f"/api/courses/{course['id']}").status_code == 404


def test_admin_cannot_delete_admin(client, admin):
    response = client.delete(f"/api/admin/users/{admin[0]['id']}", headers=auth_header(admin[1]))
    assert response.status_code == 400


def test_admin_resets_password(client, admin, student):
    response = client.post(f"/api/admin/users/{student[0]['id']}/reset-password", headers=auth_header(admin[1]))
    assert response.status_code == 200
    temp = response.json()["temporaryPassword"]

    login = client.post("/api/auth/login", json={"email": "sam@example.com", "password": temp})
    assert login.status_code == 200


def test_admin_can_delete_any_course(client, admin, course):
    response = client.delete(f"/api/courses/{course['id']}", headers=auth_header(admin[1]))
    assert response.status_code == 200


def test_ensure_admin_is_idempotent(db):
    first = accounts.ensure_admin(db)
    second = accounts.ensure_admin(db)

    assert first.id == second.id
    assert first.email == config.ADMIN_EMAIL.lower()
    assert db.query(User).filter(User.account_type == "admin").count() == 1
