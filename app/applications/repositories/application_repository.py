from uuid import UUID

from sqlalchemy.orm import Session

from app.applications.models import ApprovalStatus, InstructorApplication, SuspensionAppeal
from app.core.repository import BaseRepository


class InstructorApplicationRepository(BaseRepository[InstructorApplication]):
    def __init__(self, db: Session):
        super().__init__(db, InstructorApplication)

    def exists_by_user_and_status(self, user_id: UUID, status: ApprovalStatus) -> bool:
        return (
            self.db.query(InstructorApplication.id)
            .filter(
                InstructorApplication.user_id == user_id,
                InstructorApplication.status == status,
            )
            .first()
            is not None
        )

    def latest_by_user(self, user_id: UUID) -> InstructorApplication | None:
        return (
            self.query()
            .filter(InstructorApplication.user_id == user_id)
            .order_by(InstructorApplication.created_at.desc())
            .first()
        )

    def search(
        self, *, status: ApprovalStatus | None = None, skip: int = 0, limit: int = 20
    ) -> tuple[list[InstructorApplication], int]:
        query = self.query()
        if status is not None:
            query = query.filter(InstructorApplication.status == status)
        total = query.count()
        items = (
            query.order_by(InstructorApplication.created_at.desc()).offset(skip).limit(limit).all()
        )
        return items, total

    def count_by_status(self, status: ApprovalStatus) -> int:
        result: int = self.query().filter(InstructorApplication.status == status).count()
        return result


class SuspensionAppealRepository(BaseRepository[SuspensionAppeal]):
    def __init__(self, db: Session):
        super().__init__(db, SuspensionAppeal)

    def exists_by_user_and_status(self, user_id: UUID, status: ApprovalStatus) -> bool:
        return (
            self.db.query(SuspensionAppeal.id)
            .filter(SuspensionAppeal.user_id == user_id, SuspensionAppeal.status == status)
            .first()
            is not None
        )

    def list_by_user(self, user_id: UUID) -> list[SuspensionAppeal]:
        return (
            self.query()
            .filter(SuspensionAppeal.user_id == user_id)
            .order_by(SuspensionAppeal.created_at.desc())
            .all()
        )

    def list_pending(self) -> list[SuspensionAppeal]:
        return (
            self.query()
            .filter(SuspensionAppeal.status == ApprovalStatus.PENDING)
            .order_by(SuspensionAppeal.created_at.asc())
            .all()
        )
