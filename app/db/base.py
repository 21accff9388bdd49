"""
Database base module - imports all models for Alembic migration detection.

This module imports all SQLAlchemy models to ensure they are registered
with Alembic for automatic migration generation. While the imports appear
unused, they are essential for the migration system to work properly.
"""

from app.applications.models.instructor_application import InstructorApplication
from app.applications.models.suspension_appeal import SuspensionAppeal
from app.auth.models.user import User
from app.courses.models.category import Category
from app.courses.models.certificate import Certificate
from app.courses.models.course import Course, Lesson, Section
from app.courses.models.enrollment import Enrollment
from app.courses.models.progress import LessonProgress
from app.courses.models.review import Review
from app.db.session import Base

# Export all models for Alembic
__all__ = [
    "Base",
    "User",
    "Category",
    "Course",
    "Section",
    "Lesson",
    "Enrollment",
    "LessonProgress",
    "Certificate",
    "Review",
    "InstructorApplication",
    "SuspensionAppeal",
]
