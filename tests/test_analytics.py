import pytest

from .conftest import auth_header, create_course, signup


def test_no_courses_gives_zeros(client, instructor):
    response = client.get("/api/courses/instructor/analytics", headers=auth_header(instructor[1]))
    assert response.status_code == 200
    assert response.json() == {"totalStudents": 0, "totalRevenue": 0, "averageRating": 0, "totalCourses": 0}


def test_course_without_students_gives_zero_revenue(client, instructor, course):
    body = client.get("/api/courses/instructor/analytics", headers=auth_header(instructor[1])).json()
    assert body["totalCourses"] == 1
    assert body["totalStudents"] == 0
    assert body["totalRevenue"] == 0


def test_revenue_and_rating_across_courses(client, instructor):
    token = instructor[1]
    cheap = create_course(client, token, title="Cheap", price=10)
    pricey = create_course(client, token, title="Pricey", price=100)

    students = [signup(client, f"S{i}", f"s{i}@example.com", "student")[1] for i in range(3)]
    for student_token in students:
        client.post(f"/api/courses/{cheap['id']}/enroll", headers=auth_header(student_token))
    client.post(f"/api/courses/{pricey['id']}/enroll", headers=auth_header(students[0]))
    client.post(
        f"/api/courses/{pricey['id']}/reviews",
        json={"rating": 4, "comment": "Solid"},
        headers=auth_header(students[0]),
    )

    body = client.get("/api/courses/instructor/analytics", headers=auth_header(token)).json()
    assert body["totalStudents"] == 4
    assert body["totalRevenue"] == pytest.approx(3 * 10 + 100)
    # Unrated courses count as zero in the average.
    assert body["averageRating"] == pytest.approx(2)


def test_analytics_are_instructor_only(client, student, course):
    assert client.get("/api/courses/instructor/analytics", headers=auth_header(student[1])).status_code == 403
    assert client.get(f"/api/courses/{course['id']}/analytics", headers=auth_header(student[1])).status_code == 403


def test_course_analytics_for_empty_course(client, instructor, course):
    body = client.get(f"/api/courses/{course['id']}/analytics", headers=auth_header(instructor[1])).json()
    assert body["totalEnrolledStudents"] == 0
    assert body["overallAverageWatchTime"] == 0
    assert body["completionRate"] == 0
    assert body["courseTitle"] == course["title"]
