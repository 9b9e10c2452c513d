"""Lecture progress and playback statistics."""

from datetime import datetime

import structlog
from sqlalchemy.orm import Session

from .enrollment import find_enrollment, get_course_or_404
from .errors import NotFound, PermissionDenied
from .models import COMPLETION_THRESHOLD, Course, Enrollment, Lecture, LectureCompletion, User

logger = structlog.get_logger(__name__)


def update_lecture_stats(lecture: Lecture, watch_time: float):
    """Fold one view into the lecture's running statistics.

    ``average_watch_time`` is the incremental mean of every watch time seen so
    far; ``completion_rate`` is the incremental mean of the "watched at least
    90%" indicator.
    """
    views = (lecture.total_views or 0) + 1
    completed = 1.0 if watch_time >= (lecture.duration or 0) * COMPLETION_THRESHOLD else 0.0

    lecture.total_views = views
    lecture.average_watch_time = (lecture.average_watch_time or 0) + (watch_time - (lecture.average_watch_time or 0)) / views
    lecture.completion_rate = (lecture.completion_rate or 0) + (completed - (lecture.completion_rate or 0)) / views


def compute_progress(completed_count: int, total_lectures: int) -> float:
    if not total_lectures:
        return 0.0
    return min(100.0, completed_count * 100.0 / total_lectures)


def apply_progress(enrollment: Enrollment, lecture: Lecture, watch_time: float):
    if lecture.id not in enrollment.completed_lecture_ids:
        enrollment.completions.append(LectureCompletion(lecture=lecture, completed_at=datetime.utcnow()))

    enrollment.watch_time = (enrollment.watch_time or 0) + (watch_time or 0)
    refresh_progress(enrollment, enrollment.course)
    enrollment.last_accessed = datetime.utcnow()


def refresh_progress(enrollment: Enrollment, course: Course):
    enrollment.progress = compute_progress(len(enrollment.completions), course.total_lectures)
    if enrollment.progress >= 100 and enrollment.completed_at is None:
        enrollment.completed_at = datetime.utcnow()


def record_progress(db: Session, student: User, course_id: int, lecture_id: int, watch_time: float) -> Enrollment:
    course = get_course_or_404(db, course_id)
    enrollment = find_enrollment(db, student, course)
    if enrollment is None:
        raise NotFound("Not enrolled in this course", code="not_enrolled")

    lecture = course.find_lecture(lecture_id)
    if lecture is None:
        raise NotFound("Lecture not found")

    return _record(db, enrollment, lecture, watch_time)


def record_progress_at(db: Session, student: User, course_id: int,
                       section_index: int, lecture_index: int, watch_time: float) -> Enrollment:
    """Same as ``record_progress`` but addressed by section/lecture position."""
    course = get_course_or_404(db, course_id)
    enrollment = find_enrollment(db, student, course)
    if enrollment is None:
        raise PermissionDenied("You must be enrolled to track progress", code="not_enrolled")

    lecture = course.lecture_at(section_index, lecture_index)
    if lecture is None:
        raise NotFound("Lecture not found")

    return _record(db, enrollment, lecture, watch_time)


def _record(db: Session, enrollment: Enrollment, lecture: Lecture, watch_time: float) -> Enrollment:
    update_lecture_stats(lecture, watch_time)
    apply_progress(enrollment, lecture, watch_time)
    db.commit()
    db.refresh(enrollment)

    logger.info(
        "lecture_progress_recorded",
        student_id=enrollment.student_id,
        course_id=enrollment.course_id,
        lecture_id=lecture.id,
        progress=round(enrollment.progress, 2),
    )
    return enrollment


def get_progress(db: Session, student: User, course_id: int) -> Enrollment:
    course = get_course_or_404(db, course_id)
    enrollment = find_enrollment(db, student, course)
    if enrollment is None:
        raise NotFound("Not enrolled in this course", code="not_enrolled")
    return enrollment


def lecture_stats(db: Session, instructor: User, course_id: int, section_index: int, lecture_index: int) -> Lecture:
    course = get_course_or_404(db, course_id)
    if course.instructor_id != instructor.id:
        raise PermissionDenied("Only the instructor can view these stats")

    lecture = course.lecture_at(section_index, lecture_index)
    if lecture is None:
        raise NotFound("Lecture not found")
    return lecture
