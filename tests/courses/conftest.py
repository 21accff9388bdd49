"""
Test fixtures for courses tests.
"""

import pytest
from sqlalchemy.orm import Session

from app.courses.models import CourseStatus
from tests.utils.factories import (
    create_course_factory,
    create_course_with_lessons,
    create_enrollment_factory,
    create_lesson_factory,
    create_section_factory,
)


@pytest.fixture
def test_course(db_session: Session, test_instructor):
    """Published free course owned by ``test_instructor``."""
    return create_course_factory(db_session, test_instructor, title="Test Course")


@pytest.fixture
def paid_course(db_session: Session, test_instructor):
    return create_course_factory(db_session, test_instructor, title="Paid Course", price="49.99")


@pytest.fixture
def draft_course(db_session: Session, test_instructor):
    return create_course_factory(
        db_session, test_instructor, title="Draft Course", status=CourseStatus.DRAFT
    )


@pytest.fixture
def test_section(db_session: Session, test_course):
    return create_section_factory(db_session, test_course, order_index=1)


@pytest.fixture
def test_lesson(db_session: Session, test_section):
    return create_lesson_factory(db_session, test_section, order_index=1)


@pytest.fixture
def free_lesson(db_session: Session, test_section):
    return create_lesson_factory(
        db_session, test_section, order_index=2, title="Preview", is_free=True
    )


@pytest.fixture
def course_with_lessons(db_session: Session, test_instructor):
    """Published course with two sections of two lessons each."""
    return create_course_with_lessons(db_session, test_instructor, title="Full Course")


@pytest.fixture
def test_enrollment(db_session: Session, test_user, test_course):
    return create_enrollment_factory(db_session, test_user, test_course)
