import pytest

from peerlearn.enrollment import enroll
from peerlearn.errors import Conflict, PermissionDenied
from peerlearn.models import Course, Enrollment, User

from .conftest import auth_header


def test_student_enrolls(client, student, course):
    response = client.post(f"/api/courses/{course['id']}/enroll", headers=auth_header(student[1]))

    assert response.status_code == 200
    assert response.json() == {"message": "Successfully enrolled in course", "courseId": course["id"]}


def test_second_enrollment_is_a_conflict(client, student, course):
    first = client.post(f"/api/courses/{course['id']}/enroll", headers=auth_header(student[1]))
    second = client.post(f"/api/courses/{course['id']}/enroll", headers=auth_header(student[1]))

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["code"] == "already_enrolled"


def test_only_students_enroll(client, instructor, admin, course):
    for _, token in (instructor, admin):
        response = client.post(f"/api/courses/{course['id']}/enroll", headers=auth_header(token))
        assert response.status_code == 403


def test_enroll_in_missing_course(client, student):
    response = client.post("/api/courses/4242/enroll", headers=auth_header(student[1]))
    assert response.status_code == 404


def test_both_views_read_the_same_enrollment(client, student, other_student, instructor, course):
    for _, token in (student, other_student):
        client.post(f"/api/courses/{course['id']}/enroll", headers=auth_header(token))

    detail = client.get(f"/api/courses/{course['id']}").json()
    assert detail["totalStudents"] == 2
    assert sorted(e["student"] for e in detail["enrolledStudents"]) == sorted([student[0]["id"], other_student[0]["id"]])

    profile = client.get("/api/users/profile", headers=auth_header(student[1])).json()
    enrolled = profile["studentDetails"]["enrolledCourses"]
    assert len(enrolled) == 1
    assert enrolled[0]["course"]["id"] == course["id"]
    assert enrolled[0]["progress"] == 0
    assert enrolled[0]["watchTime"] == 0
    assert enrolled[0]["completedLectures"] == []

    instructor_profile = client.get("/api/users/profile", headers=auth_header(instructor[1])).json()
    assert instructor_profile["instructorDetails"]["totalStudents"] == 2
    assert instructor_profile["instructorDetails"]["courses"] == [course["id"]]


def test_enroll_service_writes_one_row(db, student, course):
    user = db.get(User, student[0]["id"])

    enrollment = enroll(db, user, course["id"])
    assert enrollment.progress == 0

    with pytest.raises(Conflict):
        enroll(db, user, course["id"])

    assert db.query(Enrollment).count() == 1
    assert db.get(Course, course["id"]).total_students == 1


def test_enroll_service_rejects_instructor(db, instructor, course):
    user = db.get(User, instructor[0]["id"])
    with pytest.raises(PermissionDenied) as excinfo:
        enroll(db, user, course["id"])
    assert excinfo.value.status_code == 403
