"""JSON shapes returned by the API.

Route handlers return plain dicts; FastAPI encodes the datetimes.
"""

from .models import Course, Enrollment, Lecture, Order, User


def user_summary(user: User):
    if user is None:
        return None
    summary = {
        "id": user.id,
        "name": user.name,
        "profilePicture": user.profile_picture,
    }
    if user.instructor_details is not None:
        summary["title"] = user.instructor_details.title
    return summary


def course_summary(course: Course):
    return {
        "id": course.id,
        "title": course.title,
        "description": course.description,
        "thumbnail": course.thumbnail,
        "price": course.price,
        "category": course.category,
        "level": course.level,
    }


def enrollment_progress(enrollment: Enrollment):
    return {
        "progress": enrollment.progress,
        "watchTime": enrollment.watch_time,
        "completedLectures": enrollment.completed_lecture_ids,
        "lastAccessed": enrollment.last_accessed,
        "enrolledAt": enrollment.enrolled_at,
        "completedAt": enrollment.completed_at,
        "totalLectures": enrollment.course.total_lectures,
    }


def student_enrollment(enrollment: Enrollment, expand_course=False):
    return {
        "course": course_summary(enrollment.course) if expand_course else enrollment.course_id,
        "enrolledAt": enrollment.enrolled_at,
        "progress": enrollment.progress,
        "completedLectures": enrollment.completed_lecture_ids,
        "watchTime": enrollment.watch_time,
        "lastAccessed": enrollment.last_accessed,
    }


def user_to_dict(user: User, expand_courses=False):
    data = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "accountType": user.account_type,
        "profilePicture": user.profile_picture,
        "phoneNumber": user.phone_number,
        "bio": user.bio,
        "isVerified": user.is_verified,
        "lastLogin": user.last_login,
        "createdAt": user.created_at,
        "updatedAt": user.updated_at,
    }

    details = user.student_details
    if user.is_student and details is not None:
        completed = [e for e in user.enrollments if e.completed_at is not None]
        data["studentDetails"] = {
            "collegeName": details.college_name,
            "course": details.course,
            "semester": details.semester,
            "enrollmentNumber": details.enrollment_number,
            "learningGoals": list(details.learning_goals or []),
            "skillLevel": details.skill_level,
            "enrolledCourses": [student_enrollment(e, expand_courses) for e in user.enrollments],
            "completedCourses": [e.course_id for e in completed],
            "certificates": [{"course": e.course_id, "issuedAt": e.completed_at} for e in completed],
        }

    details = user.instructor_details
    if user.is_instructor and details is not None:
        data["instructorDetails"] = {
            "title": details.title,
            "yearsOfExperience": details.years_of_experience,
            "areasOfExpertise": list(details.areas_of_expertise or []),
            "certifications": list(details.certifications or []),
            "teachingStyle": details.teaching_style,
            "availability": details.availability,
            "courses": [c.id for c in user.courses],
            "rating": details.rating,
            "totalReviews": details.total_reviews,
            "totalStudents": details.total_students,
            "totalLectures": sum(c.total_lectures for c in user.courses),
        }

    return data


def playback_stats(lecture: Lecture):
    return {
        "totalViews": lecture.total_views,
        "averageWatchTime": lecture.average_watch_time,
        "completionRate": lecture.completion_rate,
    }


def lecture_to_dict(lecture: Lecture):
    return {
        "id": lecture.id,
        "title": lecture.title,
        "description": lecture.description,
        "videoUrl": lecture.video_url,
        "duration": lecture.duration,
        "isPreview": lecture.is_preview,
        "playbackStats": playback_stats(lecture),
    }


def course_to_dict(course: Course, detail=False):
    data = {
        "id": course.id,
        "title": course.title,
        "description": course.description,
        "thumbnail": course.thumbnail,
        "price": course.price,
        "category": course.category,
        "level": course.level,
        "instructor": user_summary(course.instructor),
        "isPublished": course.is_published,
        "isFeatured": course.is_featured,
        "rating": course.rating,
        "totalStudents": course.total_students,
        "totalLectures": course.total_lectures,
        "totalDuration": course.total_duration,
        "createdAt": course.created_at,
        "updatedAt": course.updated_at,
        "sections": [
            {
                "id": section.id,
                "title": section.title,
                "lectures": [lecture_to_dict(lecture) for lecture in section.lectures],
            }
            for section in course.sections
        ],
    }
    if detail:
        if course.instructor is not None:
            data["instructor"]["bio"] = course.instructor.bio
        data["reviews"] = [
            {
                "id": review.id,
                "user": user_summary(review.user),
                "rating": review.rating,
                "comment": review.comment,
                "createdAt": review.created_at,
            }
            for review in course.reviews
        ]
        data["enrolledStudents"] = [
            {
                "student": enrollment.student_id,
                "enrolledAt": enrollment.enrolled_at,
                "progress": enrollment.progress,
                "completedLectures": enrollment.completed_lecture_ids,
            }
            for enrollment in course.enrollments
        ]
    return data


def order_to_dict(order: Order, expand=False):
    data = {
        "id": order.id,
        "student": order.student_id,
        "course": order.course_id,
        "amount": order.amount,
        "currency": order.currency,
        "paymentStatus": order.payment_status,
        "paymentMethod": order.payment_method,
        "transactionId": order.transaction_id,
        "orderDate": order.order_date,
        "paymentDate": order.payment_date,
        "refundDate": order.refund_date,
        "status": order.status,
        "createdAt": order.created_at,
    }
    if expand:
        course = order.course
        data["course"] = {
            "id": course.id,
            "title": course.title,
            "price": course.price,
            "instructor": course.instructor_id,
        }
        data["student"] = {
            "id": order.student.id,
            "name": order.student.name,
            "email": order.student.email,
        }
    return data
