import structlog
from sqlalchemy.orm import Session

from .enrollment import get_course_or_404, is_enrolled
from .errors import PermissionDenied
from .models import Course, Review, User

logger = structlog.get_logger(__name__)


def mean_rating(ratings):
    ratings = list(ratings)
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def refresh_ratings(course: Course):
    """Re-derive the course mean and its instructor's review aggregates."""
    course.rating = mean_rating(review.rating for review in course.reviews)

    instructor = course.instructor
    details = instructor.instructor_details if instructor else None
    if details is not None:
        ratings = [review.rating for owned in instructor.courses for review in owned.reviews]
        details.total_reviews = len(ratings)
        details.rating = mean_rating(ratings)


def add_review(db: Session, user: User, course_id: int, rating: int, comment: str) -> Course:
    """Rating range and a non-blank comment are enforced by ``ReviewRequest``."""
    course = get_course_or_404(db, course_id)

    if not user.is_student or not is_enrolled(db, user, course):
        raise PermissionDenied("You must be enrolled to review this course", code="not_enrolled")

    course.reviews.append(Review(user=user, rating=rating, comment=comment))
    refresh_ratings(course)

    db.commit()
    db.refresh(course)

    logger.info("review_added", course_id=course.id, user_id=user.id, rating=rating, course_rating=course.rating)
    return course
