from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.auth.models.user import User, UserRole
from app.core.repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> User | None:
        return self.query().filter(User.email == email.lower()).first()

    def exists_by_email(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def get_active_by_id(self, user_id: UUID) -> User | None:
        return self.query().filter(User.id == user_id, User.deleted_at.is_(None)).first()

    def search(
        self,
        *,
        role: UserRole | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        query = self.query().filter(User.deleted_at.is_(None))
        if role is not None:
            query = query.filter(User.role == role)
        if is_active is not None:
            query = query.filter(User.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    User.email.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                )
            )
        total = query.count()
        users = query.order_by(User.created_at.desc()).offset(skip).limit(limit).all()
        return users, total

    def list_by_role(self, role: UserRole) -> list[User]:
        return (
            self.query()
            .filter(User.role == role, User.deleted_at.is_(None))
            .order_by(User.created_at.desc())
            .all()
        )
