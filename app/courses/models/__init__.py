"""Course models."""

from app.courses.models.category import Category
from app.courses.models.certificate import Certificate
from app.courses.models.course import Course, CourseStatus, Lesson, LessonType, Section
from app.courses.models.enrollment import Enrollment
from app.courses.models.progress import LessonProgress
from app.courses.models.review import Review

__all__ = [
    "Category",
    "Course",
    "CourseStatus",
    "Section",
    "Lesson",
    "LessonType",
    "Enrollment",
    "LessonProgress",
    "Certificate",
    "Review",
]
