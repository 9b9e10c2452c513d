"""Account lifecycle: signup, login, password reset and profile edits."""

import os
import random
import re
import time
from datetime import datetime, timedelta

import structlog
from sqlalchemy.orm import Session

from . import config
from .errors import Conflict, NotFound, ValidationFailed
from .models import SKILL_LEVELS, InstructorDetails, StudentDetails, User
from .reviews import refresh_ratings
from .schemas import ProfileUpdate, SignupRequest
from .security import (
    generate_reset_token, generate_temp_password, hash_password, hash_token, verify_password,
)

logger = structlog.get_logger(__name__)

SIGNUP_EMAIL_RE = re.compile(r"^\w+([\.-]?\w+)*@\w+([\.-]?\w+)*(\.\w{2,3})+$")
PROFILE_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s-]{10,}$")

# Admin accounts only come from ensure_admin.
SIGNUP_ACCOUNT_TYPES = ("student", "instructor")

PICTURE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}
PICTURE_SUBDIR = "profile-pictures"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == normalize_email(email)).first()


def create_user(db: Session, name: str, email: str, password: str, account_type: str, **extra) -> User:
    """Create a user with the details record matching its role (no commit)."""
    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password=hash_password(password),
        account_type=account_type,
        **extra,
    )
    if account_type == "student":
        user.student_details = StudentDetails(learning_goals=[])
    elif account_type == "instructor":
        user.instructor_details = InstructorDetails(areas_of_expertise=[], certifications=[])
    db.add(user)
    return user


# -------------------- SIGNUP / LOGIN --------------------

def signup(db: Session, data: SignupRequest) -> User:
    missing = {
        "name": None if data.name else "Name is required",
        "email": None if data.email else "Email is required",
        "password": None if data.password else "Password is required",
        "accountType": None if data.account_type else "Account type is required",
    }
    if any(missing.values()):
        raise ValidationFailed("All fields are required", details=missing)

    errors = {}
    if len(data.name.strip()) < 2:
        errors["name"] = "Name must be at least 2 characters long"
    if not SIGNUP_EMAIL_RE.match(normalize_email(data.email)):
        errors["email"] = "Please enter a valid email address"
    if len(data.password) < 6:
        errors["password"] = "Password must be at least 6 characters long"
    if data.account_type not in SIGNUP_ACCOUNT_TYPES:
        errors["accountType"] = "Account type must be one of: " + ", ".join(SIGNUP_ACCOUNT_TYPES)
    if errors:
        raise ValidationFailed("Invalid signup data", details=errors)

    if find_by_email(db, data.email):
        raise Conflict("User already exists", details={"email": "An account with this email already exists"})

    user = create_user(db, data.name, data.email, data.password, data.account_type)
    db.commit()
    db.refresh(user)

    logger.info("user_signed_up", user_id=user.id, account_type=user.account_type)
    return user


def login(db: Session, email: str, password: str) -> User:
    if not email or not password:
        raise ValidationFailed(
            "Email and password are required",
            details={
                "email": None if email else "Email is required",
                "password": None if password else "Password is required",
            },
        )

    user = find_by_email(db, email)
    if user is None:
        logger.info("login_failed", reason="unknown_email")
        raise ValidationFailed("Invalid credentials", details={"email": "No account found with this email"})

    if not verify_password(password, user.password):
        logger.info("login_failed", reason="bad_password", user_id=user.id)
        raise ValidationFailed("Invalid credentials", details={"password": "Incorrect password"})

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)

    logger.info("user_logged_in", user_id=user.id, account_type=user.account_type)
    return user


def touch_last_login(db: Session, user: User):
    user.last_login = datetime.utcnow()
    db.commit()


# -------------------- PASSWORD RESET --------------------

def issue_reset_token(db: Session, email: str) -> tuple:
    user = find_by_email(db, email)
    if user is None:
        raise ValidationFailed(
            "No account found with this email",
            details={"email": "No account found with this email"},
        )

    token = generate_reset_token()
    user.reset_token = hash_token(token)
    user.reset_token_expiry = datetime.utcnow() + timedelta(minutes=config.RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()

    logger.info("reset_token_issued", user_id=user.id)
    return user, token


def reset_password(db: Session, token: str, new_password: str):
    user = (
        db.query(User)
        .filter(User.reset_token == hash_token(token), User.reset_token_expiry > datetime.utcnow())
        .first()
    )
    if user is None:
        raise ValidationFailed("Invalid or expired reset token", details={"token": "Invalid or expired reset token"})
    if len(new_password) < 6:
        raise ValidationFailed(
            "Password must be at least 6 characters long",
            details={"newPassword": "Password must be at least 6 characters long"},
        )

    user.password = hash_password(new_password)
    user.reset_token = None
    user.reset_token_expiry = None
    db.commit()
    logger.info("password_reset", user_id=user.id)


def admin_reset_password(db: Session, user_id: int) -> str:
    user = get_user_or_404(db, user_id)
    if user.is_admin:
        raise ValidationFailed("Cannot reset admin password")

    temp_password = generate_temp_password()
    user.password = hash_password(temp_password)
    user.reset_token = None
    user.reset_token_expiry = None
    db.commit()
    return temp_password


# -------------------- PROFILE --------------------

def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _validate_certifications(certifications):
    for cert in certifications:
        if not cert.name or not cert.issuer:
            raise ValidationFailed("Certification name and issuer are required")
        if cert.date:
            try:
                datetime.fromisoformat(cert.date.replace("Z", "+00:00"))
            except ValueError:
                raise ValidationFailed("Invalid certification date")
        if cert.url and not cert.url.startswith("http"):
            raise ValidationFailed("Invalid certification URL")


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    if not data.name or not data.email:
        raise ValidationFailed("Name and email are required")

    email = normalize_email(data.email)
    if not PROFILE_EMAIL_RE.match(email):
        raise ValidationFailed("Invalid email format")

    taken = db.query(User).filter(User.email == email, User.id != user.id).first()
    if taken:
        raise Conflict("Email is already taken")

    if data.phone_number and not PHONE_RE.match(data.phone_number.strip()):
        raise ValidationFailed("Invalid phone number format")

    student_in = data.student_details
    if student_in and student_in.skill_level and student_in.skill_level not in SKILL_LEVELS:
        raise ValidationFailed("Invalid skill level")

    instructor_in = data.instructor_details
    if instructor_in and instructor_in.certifications:
        _validate_certifications(instructor_in.certifications)

    user.name = data.name.strip()
    user.email = email
    user.phone_number = (data.phone_number or user.phone_number or "").strip()
    user.profile_picture = (data.profile_picture or user.profile_picture or "").strip()
    user.bio = (data.bio or user.bio or "").strip()

    # Only the block matching the account type is applied.
    if user.is_student and student_in:
        details = user.student_details or StudentDetails()
        for field, value in student_in.model_dump(exclude_unset=True, exclude_none=True).items():
            if isinstance(value, str):
                value = value.strip()
            elif field == "learning_goals":
                value = [goal.strip() for goal in value]
            setattr(details, field, value)
        user.student_details = details
    elif user.is_instructor and instructor_in:
        details = user.instructor_details or InstructorDetails()
        for field, value in instructor_in.model_dump(exclude_unset=True, exclude_none=True).items():
            if isinstance(value, str):
                value = value.strip()
            elif field == "areas_of_expertise":
                value = [area.strip() for area in value]
            elif field == "certifications":
                value = [
                    {
                        "name": cert["name"].strip(),
                        "issuer": cert["issuer"].strip(),
                        "date": cert.get("date"),
                        "url": cert["url"].strip() if cert.get("url") else None,
                    }
                    for cert in value
                ]
            setattr(details, field, value)
        user.instructor_details = details

    user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(user)

    logger.info("profile_updated", user_id=user.id)
    return user


def delete_user(db: Session, user: User):
    user_id = user.id
    for enrollment in user.enrollments:
        course = enrollment.course
        course.total_students = max(0, (course.total_students or 0) - 1)
        details = course.instructor.instructor_details if course.instructor else None
        if details is not None:
            details.total_students = max(0, (details.total_students or 0) - 1)

    reviewed = {review.course for review in user.reviews if review.course.instructor_id != user_id}

    # Cascades remove details, enrollments, reviews, orders and owned courses.
    db.delete(user)
    db.flush()
    for course in reviewed:
        db.expire(course, ["reviews"])
    for course in reviewed:
        refresh_ratings(course)
    db.commit()
    logger.info("user_deleted", user_id=user_id)


def save_profile_picture(db: Session, user: User, filename: str, content_type: str, content: bytes) -> str:
    _, ext = os.path.splitext(filename or "")
    ext = ext.lower()
    subtype = (content_type or "").split("/")[-1].lower()
    if ext not in PICTURE_EXTENSIONS or "." + subtype not in PICTURE_EXTENSIONS:
        raise ValidationFailed("Only image files are allowed!")
    if len(content) > config.MAX_PICTURE_BYTES:
        raise ValidationFailed("File too large")

    directory = os.path.join(config.UPLOAD_DIR, PICTURE_SUBDIR)
    os.makedirs(directory, exist_ok=True)

    stored_name = f"profilePicture-{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}{ext}"
    with open(os.path.join(directory, stored_name), "wb") as fh:
        fh.write(content)

    user.profile_picture = f"/uploads/{PICTURE_SUBDIR}/{stored_name}"
    db.commit()

    logger.info("profile_picture_uploaded", user_id=user.id, size=len(content))
    return user.profile_picture


# -------------------- BOOTSTRAP --------------------

def ensure_admin(db: Session):
    """Create the configured admin account on first start."""
    if not config.ADMIN_EMAIL or not config.ADMIN_PASSWORD:
        return None
    admin = find_by_email(db, config.ADMIN_EMAIL)
    if admin is None:
        admin = create_user(db, config.ADMIN_NAME, config.ADMIN_EMAIL, config.ADMIN_PASSWORD, "admin")
        db.commit()
        logger.info("admin_bootstrapped", user_id=admin.id)
    return admin
