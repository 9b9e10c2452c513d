"""
Request schemas

JSON bodies use the camelCase keys the web client sends; the Python side
works with snake_case attribute names.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import COURSE_CATEGORIES, COURSE_LEVELS, PAYMENT_METHODS

CategoryName = Literal[COURSE_CATEGORIES]
LevelName = Literal[COURSE_LEVELS]
PaymentMethodName = Literal[PAYMENT_METHODS]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -------------------- AUTH --------------------

class SignupRequest(CamelModel):
    # Presence is checked by the account service so the response can name each missing field.
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    account_type: Optional[str] = Field(None, alias="accountType")


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(CamelModel):
    email: str


class ResetPasswordRequest(CamelModel):
    token: str
    new_password: str = Field(..., alias="newPassword")


# -------------------- PROFILE --------------------

class CertificationIn(CamelModel):
    name: Optional[str] = None
    issuer: Optional[str] = None
    date: Optional[str] = None
    url: Optional[str] = None


class StudentDetailsIn(CamelModel):
    college_name: Optional[str] = Field(None, alias="collegeName")
    course: Optional[str] = None
    semester: Optional[str] = None
    enrollment_number: Optional[str] = Field(None, alias="enrollmentNumber")
    learning_goals: Optional[List[str]] = Field(None, alias="learningGoals")
    skill_level: Optional[str] = Field(None, alias="skillLevel")


class InstructorDetailsIn(CamelModel):
    title: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, alias="yearsOfExperience", ge=0)
    areas_of_expertise: Optional[List[str]] = Field(None, alias="areasOfExpertise")
    certifications: Optional[List[CertificationIn]] = None
    teaching_style: Optional[str] = Field(None, alias="teachingStyle")
    availability: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    profile_picture: Optional[str] = Field(None, alias="profilePicture")
    bio: Optional[str] = None
    student_details: Optional[StudentDetailsIn] = Field(None, alias="studentDetails")
    instructor_details: Optional[InstructorDetailsIn] = Field(None, alias="instructorDetails")


# -------------------- COURSES --------------------

class LectureIn(CamelModel):
    id: Optional[int] = None
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    video_url: str = Field(..., alias="videoUrl", min_length=1)
    duration: float = Field(..., ge=0, description="Length in minutes")
    is_preview: bool = Field(False, alias="isPreview")


class SectionIn(CamelModel):
    id: Optional[int] = None
    title: str = Field(..., min_length=1)
    lectures: List[LectureIn] = []


class CourseCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    thumbnail: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: CategoryName
    level: LevelName
    is_published: bool = Field(False, alias="isPublished")
    sections: List[SectionIn] = []


class CourseUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    thumbnail: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[CategoryName] = None
    level: Optional[LevelName] = None
    is_published: Optional[bool] = Field(None, alias="isPublished")
    sections: Optional[List[SectionIn]] = None


class ReviewRequest(CamelModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1)


class ProgressRequest(CamelModel):
    watch_time: float = Field(0, alias="watchTime", ge=0)


class FeatureRequest(CamelModel):
    is_featured: bool = Field(..., alias="isFeatured")


# -------------------- ORDERS --------------------

class OrderCreate(CamelModel):
    course_id: int = Field(..., alias="courseId")
    payment_method: PaymentMethodName = Field(..., alias="paymentMethod")
