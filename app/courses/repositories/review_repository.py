from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.repository import BaseRepository
from app.courses.models import Review


class ReviewRepository(BaseRepository[Review]):
    def __init__(self, db: Session):
        super().__init__(db, Review)

    def get_by_user_and_course(self, user_id: UUID, course_id: UUID) -> Review | None:
        return (
            self.query().filter(Review.user_id == user_id, Review.course_id == course_id).first()
        )

    def list_by_course(self, course_id: UUID) -> list[Review]:
        return (
            self.query()
            .filter(Review.course_id == course_id)
            .order_by(Review.created_at.desc())
            .all()
        )

    def rating_stats(self, course_id: UUID) -> tuple[float | None, int]:
        """Return (mean rating, review count) for a course."""
        average, total = (
            self.db.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.course_id == course_id)
            .one()
        )
        return (float(average) if average is not None else None), int(total or 0)

    def delete_by_course(self, course_id: UUID) -> None:
        self.query().filter(Review.course_id == course_id).delete(synchronize_session="fetch")
