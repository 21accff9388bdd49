import uuid
from datetime import UTC, datetime
from decimal import Decimal

from faker import Faker
from sqlalchemy.orm import Session

from app.auth.models.user import User, UserRole
from app.core.security import get_password_hash
from app.courses.models import (
    Category,
    Course,
    CourseStatus,
    Enrollment,
    Lesson,
    LessonType,
    Section,
)

fake = Faker()


def create_user_factory(
    db_session: Session,
    email: str | None = None,
    password: str = "testpass123",
    first_name: str | None = None,
    last_name: str | None = None,
    role: UserRole = UserRole.STUDENT,
    is_active: bool = True,
) -> User:
    """
    Factory function to create test users.

    Args:
        db_session: Database session
        email: User email (generates random if None)
        password: Plain text password
        first_name / last_name: Name parts (generated if None)
        role: User role
        is_active: False creates a suspended account

    Returns:
        Created User instance
    """
    user = User(
        id=uuid.uuid4(),
        email=email or fake.unique.email(),
        hashed_password=get_password_hash(password),
        first_name=first_name or fake.first_name(),
        last_name=last_name or fake.last_name(),
        role=role,
        is_active=is_active,
        created_at=datetime.now(UTC),
        updated_at=datetime.now(UTC),
    )

    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)

    return user


def create_category_factory(db_session: Session, name: str | None = None) -> Category:
    category = Category(name=name or fake.unique.word().title(), description=fake.sentence())
    db_session.add(category)
    db_session.flush()
    return category


def create_course_factory(
    db_session: Session,
    instructor: User,
    title: str | None = None,
    price: Decimal | str = "0.00",
    status: CourseStatus = CourseStatus.PUBLISHED,
    category: Category | None = None,
) -> Course:
    course = Course(
        title=title or fake.catch_phrase(),
        description=fake.paragraph(),
        price=Decimal(price),
        status=status,
        instructor_id=instructor.id,
        category_id=category.id if category else None,
    )
    db_session.add(course)
    db_session.flush()
    return course


def create_section_factory(
    db_session: Session, course: Course, order_index: int = 1, title: str | None = None
) -> Section:
    section = Section(
        course_id=course.id,
        title=title or f"Section {order_index}",
        order_index=order_index,
    )
    db_session.add(section)
    db_session.flush()
    return section


def create_lesson_factory(
    db_session: Session,
    section: Section,
    order_index: int = 1,
    title: str | None = None,
    is_free: bool = False,
    lesson_type: LessonType = LessonType.TEXT,
) -> Lesson:
    lesson = Lesson(
        section_id=section.id,
        title=title or f"Lesson {order_index}",
        type=lesson_type,
        content=fake.paragraph(),
        duration_minutes=10,
        order_index=order_index,
        is_free=is_free,
    )
    db_session.add(lesson)
    db_session.flush()
    return lesson


def create_course_with_lessons(
    db_session: Session,
    instructor: User,
    sections: int = 2,
    lessons_per_section: int = 2,
    **course_kwargs,
) -> tuple[Course, list[Section], list[Lesson]]:
    """Create a course with a full outline. Lessons are returned in course order."""
    course = create_course_factory(db_session, instructor, **course_kwargs)
    created_sections = []
    created_lessons = []
    for s in range(1, sections + 1):
        section = create_section_factory(db_session, course, order_index=s)
        created_sections.append(section)
        for i in range(1, lessons_per_section + 1):
            created_lessons.append(create_lesson_factory(db_session, section, order_index=i))
    return course, created_sections, created_lessons


def create_enrollment_factory(
    db_session: Session, user: User, course: Course, amount_paid: Decimal | str = "0.00"
) -> Enrollment:
    enrollment = Enrollment(
        user_id=user.id,
        course_id=course.id,
        amount_paid=Decimal(amount_paid),
    )
    db_session.add(enrollment)
    db_session.flush()
    return enrollment
