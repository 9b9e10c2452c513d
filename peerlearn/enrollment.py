from datetime import datetime

import structlog
from sqlalchemy.orm import Session

from .errors import Conflict, NotFound, PermissionDenied
from .models import Course, Enrollment, User

logger = structlog.get_logger(__name__)


def get_course_or_404(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFound("Course not found")
    return course


def find_enrollment(db: Session, student: User, course: Course):
    return (
        db.query(Enrollment)
        .filter(Enrollment.student_id == student.id, Enrollment.course_id == course.id)
        .first()
    )


def is_enrolled(db: Session, student: User, course: Course) -> bool:
    return find_enrollment(db, student, course) is not None


def add_enrollment(db: Session, student: User, course: Course) -> Enrollment:
    """Create the enrollment row and bump the counters, without committing."""
    now = datetime.utcnow()
    enrollment = Enrollment(
        student=student,
        course=course,
        enrolled_at=now,
        progress=0,
        watch_time=0,
        last_accessed=now,
    )
    db.add(enrollment)

    course.total_students = (course.total_students or 0) + 1
    details = course.instructor.instructor_details if course.instructor else None
    if details is not None:
        details.total_students = (details.total_students or 0) + 1
    return enrollment


def enroll(db: Session, student: User, course_id: int) -> Enrollment:
    if not student.is_student:
        raise PermissionDenied("Only students can enroll in courses")

    course = get_course_or_404(db, course_id)

    if is_enrolled(db, student, course):
        raise Conflict("Student is already enrolled in this course", code="already_enrolled")

    enrollment = add_enrollment(db, student, course)
    db.commit()
    db.refresh(enrollment)

    logger.info("student_enrolled", student_id=student.id, course_id=course.id)
    return enrollment
