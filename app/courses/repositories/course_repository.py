from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.repository import BaseRepository
from app.courses.models import Course, CourseStatus, Lesson, Section


class CourseRepository(BaseRepository[Course]):
    def __init__(self, db: Session):
        super().__init__(db, Course)

    def search(
        self,
        *,
        status: CourseStatus | None = CourseStatus.PUBLISHED,
        category_id: UUID | None = None,
        instructor_id: UUID | None = None,
        title: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Course], int]:
        query = self.query()
        if status is not None:
            query = query.filter(Course.status == status)
        if category_id is not None:
            query = query.filter(Course.category_id == category_id)
        if instructor_id is not None:
            query = query.filter(Course.instructor_id == instructor_id)
        if title:
            query = query.filter(Course.title.ilike(f"%{title}%"))
        total = query.count()
        courses = query.order_by(Course.created_at.desc()).offset(skip).limit(limit).all()
        return courses, total

    def list_by_instructor(self, instructor_id: UUID) -> list[Course]:
        return (
            self.query()
            .filter(Course.instructor_id == instructor_id)
            .order_by(Course.created_at.desc())
            .all()
        )


class SectionRepository(BaseRepository[Section]):
    def __init__(self, db: Session):
        super().__init__(db, Section)

    def list_by_course(self, course_id: UUID) -> list[Section]:
        return (
            self.query()
            .filter(Section.course_id == course_id)
            .order_by(Section.order_index)
            .all()
        )

    def count_by_course(self, course_id: UUID) -> int:
        result: int = self.query().filter(Section.course_id == course_id).count()
        return result

    def shift_down_after(self, course_id: UUID, order_index: int) -> None:
        """Close the gap left by a removed section at ``order_index``."""
        siblings = (
            self.query()
            .filter(Section.course_id == course_id, Section.order_index > order_index)
            .order_by(Section.order_index)
            .all()
        )
        for section in siblings:
            section.order_index -= 1
        self.db.flush()

    def delete_by_course(self, course_id: UUID) -> None:
        self.query().filter(Section.course_id == course_id).delete(synchronize_session="fetch")


class LessonRepository(BaseRepository[Lesson]):
    def __init__(self, db: Session):
        super().__init__(db, Lesson)

    def list_by_section(self, section_id: UUID) -> list[Lesson]:
        return (
            self.query()
            .filter(Lesson.section_id == section_id)
            .order_by(Lesson.order_index)
            .all()
        )

    def list_by_course(self, course_id: UUID) -> list[Lesson]:
        """Lessons of a course in reading order: section order, then lesson order."""
        return (
            self.query()
            .join(Section, Lesson.section_id == Section.id)
            .filter(Section.course_id == course_id)
            .order_by(Section.order_index, Lesson.order_index)
            .all()
        )

    def count_by_section(self, section_id: UUID) -> int:
        result: int = self.query().filter(Lesson.section_id == section_id).count()
        return result

    def count_by_course(self, course_id: UUID) -> int:
        result = (
            self.db.query(func.count(Lesson.id))
            .join(Section, Lesson.section_id == Section.id)
            .filter(Section.course_id == course_id)
            .scalar()
        )
        return int(result or 0)

    def count_by_sections(self, section_ids: list[UUID]) -> dict[UUID, int]:
        if not section_ids:
            return {}
        rows = (
            self.db.query(Lesson.section_id, func.count(Lesson.id))
            .filter(Lesson.section_id.in_(section_ids))
            .group_by(Lesson.section_id)
            .all()
        )
        return {section_id: count for section_id, count in rows}

    def ids_by_section(self, section_id: UUID) -> list[UUID]:
        return [row[0] for row in self.db.query(Lesson.id).filter(Lesson.section_id == section_id)]

    def ids_by_course(self, course_id: UUID) -> list[UUID]:
        return [
            row[0]
            for row in self.db.query(Lesson.id)
            .join(Section, Lesson.section_id == Section.id)
            .filter(Section.course_id == course_id)
        ]

    def shift_down_after(self, section_id: UUID, order_index: int) -> None:
        """Close the gap left by a removed lesson at ``order_index``."""
        siblings = (
            self.query()
            .filter(Lesson.section_id == section_id, Lesson.order_index > order_index)
            .order_by(Lesson.order_index)
            .all()
        )
        for lesson in siblings:
            lesson.order_index -= 1
        self.db.flush()

    def delete_by_ids(self, lesson_ids: list[UUID]) -> None:
        if lesson_ids:
            self.query().filter(Lesson.id.in_(lesson_ids)).delete(synchronize_session="fetch")
