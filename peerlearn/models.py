from datetime import datetime

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text,
    UniqueConstraint, event,
)
from sqlalchemy.orm import Session, relationship

from .database import Base

ACCOUNT_TYPES = ("student", "instructor", "admin")
SKILL_LEVELS = ("beginner", "intermediate", "advanced")
COURSE_CATEGORIES = (
    "programming",
    "design",
    "business",
    "marketing",
    "music",
    "photography",
    "other",
)
COURSE_LEVELS = ("beginner", "intermediate", "advanced")
PAYMENT_METHODS = ("credit_card", "paypal", "stripe")
PAYMENT_STATUSES = ("pending", "completed", "failed", "refunded")
ORDER_STATUSES = ("active", "completed", "cancelled", "refunded")

# A view counts as a completion once this share of the lecture was watched.
COMPLETION_THRESHOLD = 0.9


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    account_type = Column(String(20), nullable=False, index=True)
    profile_picture = Column(String(500), nullable=False, default="")
    phone_number = Column(String(50), nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    is_verified = Column(Boolean, nullable=False, default=False)
    reset_token = Column(String(255), nullable=True)  # sha256 of the emailed token
    reset_token_expiry = Column(DateTime, nullable=True)
    last_login = Column(DateTime, nullable=True, default=datetime.utcnow)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    student_details = relationship(
        "StudentDetails", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    instructor_details = relationship(
        "InstructorDetails", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    courses = relationship(
        "Course", back_populates="instructor", cascade="all, delete-orphan",
        order_by="Course.created_at.desc()",
    )
    enrollments = relationship(
        "Enrollment", back_populates="student", cascade="all, delete-orphan",
        order_by="Enrollment.enrolled_at",
    )
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="student", cascade="all, delete-orphan")

    @property
    def is_student(self):
        return self.account_type == "student"

    @property
    def is_instructor(self):
        return self.account_type == "instructor"

    @property
    def is_admin(self):
        return self.account_type == "admin"


class StudentDetails(Base):
    __tablename__ = "student_details"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    college_name = Column(String(200), nullable=False, default="")
    course = Column(String(200), nullable=False, default="")
    semester = Column(String(50), nullable=True)
    enrollment_number = Column(String(100), nullable=False, default="")
    learning_goals = Column(JSON, nullable=False, default=list)
    skill_level = Column(String(20), nullable=False, default="beginner")

    user = relationship("User", back_populates="student_details")


class InstructorDetails(Base):
    __tablename__ = "instructor_details"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    title = Column(String(200), nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    areas_of_expertise = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)  # [{name, issuer, date, url}]
    teaching_style = Column(String(200), nullable=True)
    availability = Column(String(200), nullable=True)
    rating = Column(Float, nullable=False, default=0)
    total_reviews = Column(Integer, nullable=False, default=0)
    total_students = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="instructor_details")


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    thumbnail = Column(String(500), nullable=False)
    price = Column(Float, nullable=False, default=0)
    category = Column(String(50), nullable=False, index=True)
    level = Column(String(20), nullable=False, index=True)
    instructor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_published = Column(Boolean, nullable=False, default=False, index=True)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)
    rating = Column(Float, nullable=False, default=0)
    total_students = Column(Integer, nullable=False, default=0)
    total_lectures = Column(Integer, nullable=False, default=0)
    total_duration = Column(Float, nullable=False, default=0)  # minutes
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    instructor = relationship("User", back_populates="courses")
    sections = relationship(
        "CourseSection", back_populates="course", cascade="all, delete-orphan",
        order_by="CourseSection.position",
    )
    enrollments = relationship(
        "Enrollment", back_populates="course", cascade="all, delete-orphan",
        order_by="Enrollment.enrolled_at",
    )
    reviews = relationship(
        "Review", back_populates="course", cascade="all, delete-orphan",
        order_by="Review.created_at",
    )
    orders = relationship("Order", back_populates="course", cascade="all, delete-orphan")

    def lectures(self):
        return [lecture for section in self.sections for lecture in section.lectures]

    def find_lecture(self, lecture_id):
        for lecture in self.lectures():
            if lecture.id == lecture_id:
                return lecture
        return None

    def lecture_at(self, section_index, lecture_index):
        """Positional lookup used by the index-based player routes."""
        if not 0 <= section_index < len(self.sections):
            return None
        lectures = self.sections[section_index].lectures
        if not 0 <= lecture_index < len(lectures):
            return None
        return lectures[lecture_index]

    def recompute_totals(self):
        lectures = self.lectures()
        self.total_lectures = len(lectures)
        self.total_duration = sum(lecture.duration or 0 for lecture in lectures)


class CourseSection(Base):
    __tablename__ = "course_sections"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    course = relationship("Course", back_populates="sections")
    lectures = relationship(
        "Lecture", back_populates="section", cascade="all, delete-orphan",
        order_by="Lecture.position",
    )


class Lecture(Base):
    __tablename__ = "lectures"

    id = Column(Integer, primary_key=True, index=True)
    section_id = Column(Integer, ForeignKey("course_sections.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    video_url = Column(String(500), nullable=False)
    duration = Column(Float, nullable=False, default=0)  # minutes
    is_preview = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)
    total_views = Column(Integer, nullable=False, default=0)
    average_watch_time = Column(Float, nullable=False, default=0)
    completion_rate = Column(Float, nullable=False, default=0)

    section = relationship("CourseSection", back_populates="lectures")
    completions = relationship(
        "LectureCompletion", back_populates="lecture", cascade="all, delete-orphan"
    )


class Enrollment(Base):
    """The single record of a student taking a course.

    Both the student's ``enrolledCourses`` and the course's
    ``enrolledStudents`` are read from this table.
    """

    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),)

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    enrolled_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    progress = Column(Float, nullable=False, default=0)  # 0..100
    watch_time = Column(Float, nullable=False, default=0)
    last_accessed = Column(DateTime, nullable=False, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    student = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
    completions = relationship(
        "LectureCompletion", back_populates="enrollment", cascade="all, delete-orphan",
        order_by="LectureCompletion.completed_at",
    )

    @property
    def completed_lecture_ids(self):
        return [completion.lecture_id for completion in self.completions]


class LectureCompletion(Base):
    __tablename__ = "lecture_completions"
    __table_args__ = (UniqueConstraint("enrollment_id", "lecture_id", name="uq_completion_enrollment_lecture"),)

    id = Column(Integer, primary_key=True, index=True)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), nullable=False, index=True)
    lecture_id = Column(Integer, ForeignKey("lectures.id"), nullable=False, index=True)
    completed_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    enrollment = relationship("Enrollment", back_populates="completions")
    lecture = relationship("Lecture", back_populates="completions")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1..5
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    course = relationship("Course", back_populates="reviews")
    user = relationship("User", back_populates="reviews")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(10), nullable=False, default="USD")
    payment_status = Column(String(20), nullable=False, default="pending", index=True)
    payment_method = Column(String(20), nullable=False)
    transaction_id = Column(String(100), unique=True, nullable=False, index=True)
    order_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    payment_date = Column(DateTime, nullable=True)
    refund_date = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    student = relationship("User", back_populates="orders")
    course = relationship("Course", back_populates="orders")


@event.listens_for(Session, "before_flush")
def _recompute_course_totals(session, flush_context, instances):
    """Keep totalLectures/totalDuration in step with the nested sections."""
    touched = set()
    for obj in list(session.new) + list(session.dirty) + list(session.deleted):
        course = None
        if isinstance(obj, Course):
            course = obj
        elif isinstance(obj, CourseSection):
            course = obj.course
        elif isinstance(obj, Lecture) and obj.section is not None:
            course = obj.section.course
        if course is not None and course not in session.deleted:
            touched.add(course)

    for course in touched:
        course.recompute_totals()
