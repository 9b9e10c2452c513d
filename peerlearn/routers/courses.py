from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import analytics, courses, enrollment, progress, reviews
from ..database import get_db
from ..models import User
from ..schemas import CourseCreate, CourseUpdate, ProgressRequest, ReviewRequest
from ..security import get_current_instructor, get_current_user
from ..serializers import course_to_dict, enrollment_progress, playback_stats

router = APIRouter(prefix="/api/courses", tags=["courses"])


# Fixed paths are declared before /{course_id}.

@router.get("/featured")
def get_featured_courses(db: Session = Depends(get_db)):
    return [course_to_dict(c) for c in courses.featured_courses(db)]


@router.get("/instructor")
def get_instructor_courses(instructor: User = Depends(get_current_instructor), db: Session = Depends(get_db)):
    return [course_to_dict(c) for c in courses.instructor_courses(db, instructor)]


@router.get("/instructor/analytics")
def get_instructor_analytics(instructor: User = Depends(get_current_instructor), db: Session = Depends(get_db)):
    return analytics.instructor_analytics(db, instructor)


@router.get("")
def list_courses(
    search: Optional[str] = None,
    category: Optional[str] = None,
    level: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return [course_to_dict(c) for c in courses.list_courses(db, search, category, level)]


@router.post("", status_code=201)
def create_course(data: CourseCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    course = courses.create_course(db, user, data)
    return course_to_dict(course, detail=True)


@router.get("/{course_id}")
def get_course(course_id: int, db: Session = Depends(get_db)):
    course = enrollment.get_course_or_404(db, course_id)
    return course_to_dict(course, detail=True)


@router.put("/{course_id}")
def update_course(course_id: int, data: CourseUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    course = courses.update_course(db, user, course_id, data)
    return course_to_dict(course, detail=True)


@router.delete("/{course_id}")
def delete_course(course_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    courses.delete_course(db, user, course_id)
    return {"message": "Course removed"}


@router.get("/{course_id}/analytics")
def get_course_analytics(course_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return analytics.course_analytics(db, user, course_id)


@router.post("/{course_id}/enroll")
def enroll_in_course(course_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    record = enrollment.enroll(db, user, course_id)
    return {"message": "Successfully enrolled in course", "courseId": record.course_id}


@router.post("/{course_id}/reviews")
def add_review(course_id: int, data: ReviewRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    course = reviews.add_review(db, user, course_id, data.rating, data.comment)
    return course_to_dict(course, detail=True)


@router.post("/{course_id}/lectures/{lecture_id}/progress")
def update_lecture_progress(
    course_id: int,
    lecture_id: int,
    data: ProgressRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    record = progress.record_progress(db, user, course_id, lecture_id, data.watch_time)
    return {"message": "Progress updated successfully", "progress": enrollment_progress(record)}


@router.get("/{course_id}/progress")
def get_course_progress(course_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    record = progress.get_progress(db, user, course_id)
    return {"progress": enrollment_progress(record)}


@router.post("/{course_id}/sections/{section_index}/lectures/{lecture_index}/progress")
def update_playback_progress(
    course_id: int,
    section_index: int,
    lecture_index: int,
    data: ProgressRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    record = progress.record_progress_at(db, user, course_id, section_index, lecture_index, data.watch_time)
    return {
        "message": "Progress updated successfully",
        "progress": record.progress,
        "watchTime": record.watch_time,
    }


@router.get("/{course_id}/sections/{section_index}/lectures/{lecture_index}/stats")
def get_lecture_stats(
    course_id: int,
    section_index: int,
    lecture_index: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    lecture = progress.lecture_stats(db, user, course_id, section_index, lecture_index)
    return {"stats": playback_stats(lecture)}
