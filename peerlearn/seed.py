"""Demo accounts and courses for local development (SEED_DEMO_DATA=true)."""

import structlog
from sqlalchemy.orm import Session

from .accounts import create_user, find_by_email
from .courses import build_sections
from .models import Course, User
from .schemas import SectionIn

logger = structlog.get_logger(__name__)

DEMO_VIDEO = "https://www.youtube.com/embed/videoseries?list=PL4cUxeGkcWxihETXpEsYh_pcRm5JNS_Rk"

DEMO_COURSES = [
    {
        "title": "Introduction to React",
        "description": "Learn the basics of React.js for building modern web applications.",
        "thumbnail": "https://via.placeholder.com/400x200?text=React+Course",
        "price": 49.99,
        "category": "programming",
        "level": "beginner",
        "is_featured": True,
        "sections": [
            {"title": "Getting Started", "lectures": [
                {"title": "What is React?", "description": "Intro", "videoUrl": DEMO_VIDEO, "duration": 10, "isPreview": True},
                {"title": "Setting up Environment", "description": "Setup", "videoUrl": DEMO_VIDEO, "duration": 15},
            ]},
            {"title": "Components and Props", "lectures": [
                {"title": "Functional Components", "description": "Func", "videoUrl": DEMO_VIDEO, "duration": 20},
                {"title": "Props in React", "description": "Props", "videoUrl": DEMO_VIDEO, "duration": 18},
            ]},
        ],
    },
    {
        "title": "Advanced Node.js",
        "description": "Deep dive into Node.js, Express, and MongoDB for backend development.",
        "thumbnail": "https://via.placeholder.com/400x200?text=Node.js+Course",
        "price": 79.99,
        "category": "programming",
        "level": "advanced",
        "is_featured": True,
        "sections": [
            {"title": "API Design", "lectures": [
                {"title": "RESTful APIs", "description": "REST", "videoUrl": DEMO_VIDEO, "duration": 25},
                {"title": "Authentication with JWT", "description": "JWT", "videoUrl": DEMO_VIDEO, "duration": 30},
            ]},
        ],
    },
    {
        "title": "UI/UX Design Principles",
        "description": "Master the fundamentals of user interface and user experience design.",
        "thumbnail": "https://via.placeholder.com/400x200?text=UI/UX+Design",
        "price": 59.99,
        "category": "design",
        "level": "intermediate",
        "is_featured": False,
        "sections": [
            {"title": "Usability Heuristics", "lectures": [
                {"title": "Jakob Nielsen's 10 Heuristics", "description": "Heuristics", "videoUrl": DEMO_VIDEO, "duration": 20},
            ]},
        ],
    },
]


def seed_demo_data(db: Session):
    if db.query(Course).count() and db.query(User).filter(User.account_type != "admin").count():
        logger.info("seed_skipped", reason="database already contains data")
        return

    student = find_by_email(db, "test@example.com")
    if student is None:
        student = create_user(db, "Test Student", "test@example.com", "password123", "student")
        student.student_details.skill_level = "beginner"
        student.student_details.learning_goals = ["Web Development", "React"]

    instructor = find_by_email(db, "instructor@example.com")
    if instructor is None:
        instructor = create_user(db, "Demo Instructor", "instructor@example.com", "password123", "instructor")
        details = instructor.instructor_details
        details.title = "Senior Developer"
        details.years_of_experience = 5
        details.areas_of_expertise = ["Web Development", "React", "Node.js"]
        details.teaching_style = "Practical"
        details.availability = "Weekends"

    for data in DEMO_COURSES:
        if db.query(Course).filter(Course.title == data["title"]).first():
            continue
        sections = [SectionIn.model_validate(section) for section in data["sections"]]
        db.add(Course(
            title=data["title"],
            description=data["description"],
            thumbnail=data["thumbnail"],
            price=data["price"],
            category=data["category"],
            level=data["level"],
            is_published=True,
            is_featured=data["is_featured"],
            instructor=instructor,
            sections=build_sections(sections),
        ))
        logger.info("course_seeded", title=data["title"])

    db.commit()
