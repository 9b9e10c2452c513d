import random
import string
import time
from datetime import datetime

import structlog
from sqlalchemy.orm import Session

from .enrollment import add_enrollment, get_course_or_404, is_enrolled
from .errors import Conflict, NotFound, PermissionDenied
from .models import Order, User

logger = structlog.get_logger(__name__)


def new_transaction_id():
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"TRX-{int(time.time() * 1000)}-{suffix}"


def create_order(db: Session, student: User, course_id: int, payment_method: str) -> Order:
    if not student.is_student:
        raise PermissionDenied("Only students can create orders")

    course = get_course_or_404(db, course_id)

    active = (
        db.query(Order)
        .filter(Order.student_id == student.id, Order.course_id == course.id, Order.status == "active")
        .first()
    )
    if active or is_enrolled(db, student, course):
        raise Conflict("You are already enrolled in this course", code="already_enrolled")

    order = Order(
        student=student,
        course=course,
        amount=course.price,
        payment_method=payment_method,
        transaction_id=new_transaction_id(),
    )
    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info("order_created", order_id=order.id, student_id=student.id, course_id=course.id, amount=order.amount)
    return order


def get_own_order(db: Session, user: User, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound("Order not found")
    if order.student_id != user.id:
        raise PermissionDenied("Not authorized")
    return order


def complete_order(db: Session, user: User, order_id: int) -> Order:
    """Mark the payment as completed and enroll the student in one commit."""
    order = get_own_order(db, user, order_id)
    if order.payment_status == "completed":
        raise Conflict("Order already completed")

    # Payment gateway integration is not part of this service; the charge is
    # treated as successful.
    order.payment_status = "completed"
    order.status = "active"
    order.payment_date = datetime.utcnow()

    if not is_enrolled(db, user, order.course):
        add_enrollment(db, user, order.course)

    db.commit()
    db.refresh(order)

    logger.info("order_completed", order_id=order.id, student_id=user.id, course_id=order.course_id)
    return order


def my_orders(db: Session, user: User):
    return (
        db.query(Order)
        .filter(Order.student_id == user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
