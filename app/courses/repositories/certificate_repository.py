from uuid import UUID

from sqlalchemy.orm import Session

from app.core.repository import BaseRepository
from app.courses.models import Certificate


class CertificateRepository(BaseRepository[Certificate]):
    def __init__(self, db: Session):
        super().__init__(db, Certificate)

    def get_by_user_and_course(self, user_id: UUID, course_id: UUID) -> Certificate | None:
        return (
            self.query()
            .filter(Certificate.user_id == user_id, Certificate.course_id == course_id)
            .first()
        )

    def get_by_number(self, certificate_number: str) -> Certificate | None:
        return self.query().filter(Certificate.certificate_number == certificate_number).first()

    def list_by_user(self, user_id: UUID) -> list[Certificate]:
        return (
            self.query()
            .filter(Certificate.user_id == user_id)
            .order_by(Certificate.issued_at.desc())
            .all()
        )

    def delete_by_course(self, course_id: UUID) -> None:
        self.query().filter(Certificate.course_id == course_id).delete(
            synchronize_session="fetch"
        )
