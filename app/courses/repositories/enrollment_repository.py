from uuid import UUID

from sqlalchemy.orm import Session

from app.core.repository import BaseRepository
from app.courses.models import Enrollment


class EnrollmentRepository(BaseRepository[Enrollment]):
    def __init__(self, db: Session):
        super().__init__(db, Enrollment)

    def get_by_user_and_course(self, user_id: UUID, course_id: UUID) -> Enrollment | None:
        return (
            self.query()
            .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
            .first()
        )

    def exists_by_user_and_course(self, user_id: UUID, course_id: UUID) -> bool:
        return (
            self.db.query(Enrollment.id)
            .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
            .first()
            is not None
        )

    def list_by_user(self, user_id: UUID) -> list[Enrollment]:
        return (
            self.query()
            .filter(Enrollment.user_id == user_id)
            .order_by(Enrollment.enrolled_at.desc())
            .all()
        )

    def list_by_course(self, course_id: UUID) -> list[Enrollment]:
        return (
            self.query()
            .filter(Enrollment.course_id == course_id)
            .order_by(Enrollment.enrolled_at.desc())
            .all()
        )

    def ids_by_course(self, course_id: UUID) -> list[UUID]:
        return [
            row[0] for row in self.db.query(Enrollment.id).filter(Enrollment.course_id == course_id)
        ]

    def delete_by_course(self, course_id: UUID) -> None:
        self.query().filter(Enrollment.course_id == course_id).delete(
            synchronize_session="fetch"
        )
