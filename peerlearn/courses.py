from datetime import datetime

import structlog
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .enrollment import get_course_or_404
from .errors import PermissionDenied
from .models import Course, CourseSection, Lecture, User
from .progress import refresh_progress
from .schemas import CourseCreate, CourseUpdate

logger = structlog.get_logger(__name__)

FEATURED_LIMIT = 6


def build_sections(sections_in, course: Course = None):
    """Map section payloads onto ORM rows.

    Sections and lectures that carry the id of one of ``course``'s rows are
    updated in place, so their playback stats and completions survive. Rows
    left out of the payload become orphans and are deleted.
    """
    known_sections = {section.id: section for section in course.sections} if course else {}
    known_lectures = {lecture.id: lecture for lecture in course.lectures()} if course else {}

    sections = []
    for section_position, section_in in enumerate(sections_in):
        section = known_sections.pop(section_in.id, None) or CourseSection()
        section.title = section_in.title.strip()
        section.position = section_position

        lectures = []
        for lecture_position, lecture_in in enumerate(section_in.lectures):
            lecture = known_lectures.pop(lecture_in.id, None) or Lecture()
            lecture.title = lecture_in.title.strip()
            lecture.description = lecture_in.description
            lecture.video_url = lecture_in.video_url
            lecture.duration = lecture_in.duration
            lecture.is_preview = lecture_in.is_preview
            lecture.position = lecture_position
            lectures.append(lecture)
        section.lectures = lectures
        sections.append(section)
    return sections


def list_courses(db: Session, search: str = None, category: str = None, level: str = None):
    query = db.query(Course)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Course.title.ilike(pattern), Course.description.ilike(pattern)))
    if category:
        query = query.filter(Course.category == category)
    if level:
        query = query.filter(Course.level == level)

    return query.order_by(Course.created_at.desc(), Course.id.desc()).all()


def featured_courses(db: Session):
    return (
        db.query(Course)
        .filter(Course.is_featured.is_(True))
        .order_by(Course.created_at.desc(), Course.id.desc())
        .limit(FEATURED_LIMIT)
        .all()
    )


def instructor_courses(db: Session, instructor: User):
    return (
        db.query(Course)
        .filter(Course.instructor_id == instructor.id)
        .order_by(Course.created_at.desc(), Course.id.desc())
        .all()
    )


def create_course(db: Session, instructor: User, data: CourseCreate) -> Course:
    if not instructor.is_instructor:
        raise PermissionDenied("Only instructors can create courses")

    course = Course(
        title=data.title.strip(),
        description=data.description,
        thumbnail=data.thumbnail,
        price=data.price,
        category=data.category,
        level=data.level,
        is_published=data.is_published,
        instructor=instructor,
        sections=build_sections(data.sections),
    )
    db.add(course)
    db.commit()
    db.refresh(course)

    logger.info("course_created", course_id=course.id, instructor_id=instructor.id, lectures=course.total_lectures)
    return course


def get_owned_course(db: Session, user: User, course_id: int) -> Course:
    course = get_course_or_404(db, course_id)
    if course.instructor_id != user.id:
        raise PermissionDenied("Not authorized")
    return course


def update_course(db: Session, user: User, course_id: int, data: CourseUpdate) -> Course:
    course = get_owned_course(db, user, course_id)

    changes = data.model_dump(exclude_unset=True, exclude={"sections"})
    for field, value in changes.items():
        if value is not None:
            setattr(course, field, value)
    course.updated_at = datetime.utcnow()

    if data.sections is not None:
        course.sections = build_sections(data.sections, course)
        # Flush so removed lectures and their completions are gone before progress is re-derived.
        db.flush()
        for enrollment in course.enrollments:
            db.expire(enrollment, ["completions"])
            refresh_progress(enrollment, course)

    db.commit()
    db.refresh(course)

    logger.info("course_updated", course_id=course.id, fields=sorted(changes))
    return course


def delete_course(db: Session, user: User, course_id: int):
    course = get_course_or_404(db, course_id)
    if course.instructor_id != user.id and not user.is_admin:
        raise PermissionDenied("Not authorized")

    instructor_details = course.instructor.instructor_details if course.instructor else None
    if instructor_details is not None:
        instructor_details.total_students = max(0, (instructor_details.total_students or 0) - len(course.enrollments))

    db.delete(course)
    db.commit()
    logger.info("course_deleted", course_id=course_id, user_id=user.id)


def set_featured(db: Session, course_id: int, is_featured: bool) -> Course:
    course = get_course_or_404(db, course_id)
    course.is_featured = is_featured
    db.commit()
    db.refresh(course)
    return course
