"""Instructor-facing aggregates."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from .enrollment import get_course_or_404
from .errors import PermissionDenied
from .models import Course, Enrollment, User


def enrollment_counts(db: Session, course_ids):
    """Map course id -> number of enrolled students, in one grouped query."""
    if not course_ids:
        return {}
    rows = (
        db.query(Enrollment.course_id, func.count(Enrollment.id))
        .filter(Enrollment.course_id.in_(course_ids))
        .group_by(Enrollment.course_id)
        .all()
    )
    return {course_id: count for course_id, count in rows}


def instructor_analytics(db: Session, instructor: User) -> dict:
    courses = db.query(Course).filter(Course.instructor_id == instructor.id).all()
    counts = enrollment_counts(db, [c.id for c in courses])

    analytics = {
        "totalStudents": 0,
        "totalRevenue": 0.0,
        "averageRating": 0.0,
        "totalCourses": len(courses),
    }

    rating_sum = 0.0
    for course in courses:
        students = counts.get(course.id, 0)
        analytics["totalStudents"] += students
        analytics["totalRevenue"] += students * (course.price or 0)
        rating_sum += course.rating or 0

    if courses:
        analytics["averageRating"] = rating_sum / len(courses)

    return analytics


def course_analytics(db: Session, instructor: User, course_id: int) -> dict:
    course = get_course_or_404(db, course_id)
    if course.instructor_id != instructor.id:
        raise PermissionDenied("Access denied. Not the course instructor.")

    total_enrolled = len(course.enrollments)

    total_views = 0
    total_watch_time = 0.0
    for lecture in course.lectures():
        total_views += lecture.total_views or 0
        total_watch_time += (lecture.average_watch_time or 0) * (lecture.total_views or 0)

    with_progress = sum(1 for enrollment in course.enrollments if (enrollment.progress or 0) > 0)

    return {
        "totalEnrolledStudents": total_enrolled,
        "totalLectures": course.total_lectures,
        "totalDuration": course.total_duration,
        "totalLectureViews": total_views,
        "overallAverageWatchTime": total_watch_time / total_views if total_views else 0,
        "completionRate": with_progress * 100.0 / total_enrolled if total_enrolled else 0,
        "courseTitle": course.title,
        "courseThumbnail": course.thumbnail,
    }
