from .conftest import SAMPLE_SECTIONS, auth_header, create_course, signup


def test_instructor_creates_course_with_totals(client, instructor):
    course = create_course(client, instructor[1])

    assert course["instructor"]["name"] == "Ivy Instructor"
    assert course["totalLectures"] == 4
    assert course["totalDuration"] == 100
    assert [s["title"] for s in course["sections"]] == ["Getting Started", "Core Ideas"]
    assert course["sections"][0]["lectures"][0]["isPreview"] is True
    assert course["sections"][0]["lectures"][0]["playbackStats"] == {
        "totalViews": 0, "averageWatchTime": 0, "completionRate": 0,
    }


def test_student_cannot_create_course(client, student):
    response = client.post(
        "/api/courses",
        json={
            "title": "Nope", "description": "x", "thumbnail": "t", "price": 1,
            "category": "design", "level": "beginner",
        },
        headers=auth_header(student[1]),
    )
    assert response.status_code == 403


def test_course_validation_errors_are_400(client, instructor):
    response = client.post(
        "/api/courses",
        json={"title": "Bad", "description": "x", "thumbnail": "t", "price": -5,
              "category": "cooking", "level": "beginner"},
        headers=auth_header(instructor[1]),
    )
    assert response.status_code == 400
    details = response.json()["details"]
    assert "price" in details and "category" in details


def test_list_search_and_filter(client, instructor):
    token = instructor[1]
    create_course(client, token, title="Intro to React")
    create_course(client, token, title="Color Theory", description="Design basics", category="design", level="intermediate")

    everything = client.get("/api/courses").json()
    assert [c["title"] for c in everything] == ["Color Theory", "Intro to React"]

    assert [c["title"] for c in client.get("/api/courses", params={"search": "react"}).json()] == ["Intro to React"]
    assert [c["title"] for c in client.get("/api/courses", params={"category": "design"}).json()] == ["Color Theory"]
    assert client.get("/api/courses", params={"level": "advanced"}).json() == []


def test_get_course_detail_and_missing(client, course):
    detail = client.get(f"/api/courses/{course['id']}")
    assert detail.status_code == 200
    assert detail.json()["reviews"] == []
    assert detail.json()["enrolledStudents"] == []

    assert client.get("/api/courses/9999").status_code == 404


def test_featured_courses_are_curated_by_admin(client, course, admin):
    assert client.get("/api/courses/featured").json() == []

    response = client.put(
        f"/api/admin/courses/{course['id']}/feature",
        json={"isFeatured": True},
        headers=auth_header(admin[1]),
    )
    assert response.status_code == 200

    featured = client.get("/api/courses/featured").json()
    assert [c["id"] for c in featured] == [course["id"]]


def test_featured_list_is_capped(client, instructor, admin):
    for i in range(8):
        created = create_course(client, instructor[1], title=f"Course {i}")
        client.put(f"/api/admin/courses/{created['id']}/feature", json={"isFeatured": True},
                   headers=auth_header(admin[1]))

    assert len(client.get("/api/courses/featured").json()) == 6


def test_update_course_by_owner_recomputes_totals(client, instructor, course):
    response = client.put(
        f"/api/courses/{course['id']}",
        json={"price": 75, "sections": [SAMPLE_SECTIONS[0]]},
        headers=auth_header(instructor[1]),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["price"] == 75
    assert body["title"] == course["title"]
    assert body["totalLectures"] == 2
    assert body["totalDuration"] == 30


def test_only_owner_updates_or_deletes(client, course):
    _, other = signup(client, "Other Instructor", "other@example.com", "instructor")

    assert client.put(f"/api/courses/{course['id']}", json={"price": 1}, headers=auth_header(other)).status_code == 403
    assert client.delete(f"/api/courses/{course['id']}", headers=auth_header(other)).status_code == 403


def test_delete_course(client, instructor, course, student):
    client.post(f"/api/courses/{course['id']}/enroll", headers=auth_header(student[1]))

    response = client.delete(f"/api/courses/{course['id']}", headers=auth_header(instructor[1]))
    assert response.status_code == 200
    assert client.get(f"/api/courses/{course['id']}").status_code == 404

    profile = client.get("/api/users/profile", headers=auth_header(student[1])).json()
    assert profile["studentDetails"]["enrolledCourses"] == []


def test_instructor_course_listing(client, instructor, course, student):
    response = client.get("/api/courses/instructor", headers=auth_header(instructor[1]))
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [course["id"]]

    assert client.get("/api/courses/instructor", headers=auth_header(student[1])).status_code == 403
