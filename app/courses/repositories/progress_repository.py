from uuid import UUID

from sqlalchemy.orm import Session

from app.core.repository import BaseRepository
from app.courses.models import Lesson, LessonProgress, Section


class ProgressRepository(BaseRepository[LessonProgress]):
    def __init__(self, db: Session):
        super().__init__(db, LessonProgress)

    def get_by_enrollment_and_lesson(
        self, enrollment_id: UUID, lesson_id: UUID
    ) -> LessonProgress | None:
        return (
            self.query()
            .filter(
                LessonProgress.enrollment_id == enrollment_id,
                LessonProgress.lesson_id == lesson_id,
            )
            .first()
        )

    def count_completed(self, enrollment_id: UUID) -> int:
        result: int = (
            self.query()
            .filter(
                LessonProgress.enrollment_id == enrollment_id,
                LessonProgress.completed.is_(True),
            )
            .count()
        )
        return result

    def list_by_enrollment(self, enrollment_id: UUID) -> list[LessonProgress]:
        return (
            self.query()
            .join(Lesson, LessonProgress.lesson_id == Lesson.id)
            .join(Section, Lesson.section_id == Section.id)
            .filter(LessonProgress.enrollment_id == enrollment_id)
            .order_by(Section.order_index, Lesson.order_index)
            .all()
        )

    def delete_by_enrollments(self, enrollment_ids: list[UUID]) -> None:
        if enrollment_ids:
            self.query().filter(LessonProgress.enrollment_id.in_(enrollment_ids)).delete(
                synchronize_session="fetch"
            )

    def delete_by_lessons(self, lesson_ids: list[UUID]) -> None:
        if lesson_ids:
            self.query().filter(LessonProgress.lesson_id.in_(lesson_ids)).delete(
                synchronize_session="fetch"
            )
