from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.auth.models.user import User, UserRole
from app.auth.permissions import Action, authorize
from app.auth.repositories.user_repository import UserRepository
from app.auth.schemas.user import CreateStaffUserRequest, UserResponse, UserStatusResponse
from app.auth.services.auth_service import AuthService
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.core.schemas import PaginatedResponse, paginated_response

logger = structlog.get_logger(__name__)


class UserAdminService:
    """User moderation for admins and staff account management for super admins."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def _get_user_or_404(self, user_id: UUID) -> User:
        user = self.users.get_active_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", resource="user")
        return user

    def _get_manageable_user(self, actor: User, user_id: UUID) -> User:
        user = self._get_user_or_404(user_id)
        if not authorize(actor, Action.MANAGE_USERS, user):
            raise ForbiddenError("You cannot manage this account")
        return user

    def list_users(
        self,
        *,
        role: UserRole | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[UserResponse]:
        users, total = self.users.search(
            role=role,
            is_active=is_active,
            search=search,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return paginated_response(
            [UserResponse.model_validate(u) for u in users], total=total, page=page, limit=limit
        )

    def get_user(self, user_id: UUID) -> UserResponse:
        return UserResponse.model_validate(self._get_user_or_404(user_id))

    def toggle_status(self, actor: User, user_id: UUID) -> UserStatusResponse:
        user = self._get_manageable_user(actor, user_id)
        user.is_active = not user.is_active
        self.db.commit()

        logger.info(
            "user_status_toggled",
            user_id=str(user.id),
            is_active=user.is_active,
            actor_id=str(actor.id),
        )
        return UserStatusResponse(
            id=user.id,
            is_active=user.is_active,
            message="Account activated" if user.is_active else "Account suspended",
        )

    def soft_delete(self, actor: User, user_id: UUID) -> None:
        user = self._get_manageable_user(actor, user_id)
        user.deleted_at = datetime.now(UTC)
        user.is_active = False
        self.db.commit()
        logger.info("user_deleted", user_id=str(user.id), actor_id=str(actor.id))

    def create_staff_user(self, data: CreateStaffUserRequest, role: UserRole) -> UserResponse:
        if role not in (UserRole.ADMIN, UserRole.INSTRUCTOR):
            raise ValidationError("Only admin or instructor accounts can be created", field="role")
        user = AuthService(self.db).create_user(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            role=role,
        )
        return UserResponse.model_validate(user)

    def list_admins(self) -> list[UserResponse]:
        return [UserResponse.model_validate(u) for u in self.users.list_by_role(UserRole.ADMIN)]

    def delete_admin(self, actor: User, admin_id: UUID) -> None:
        user = self._get_user_or_404(admin_id)
        if user.role is not UserRole.ADMIN:
            raise ValidationError("User is not an admin", field="role")
        user.deleted_at = datetime.now(UTC)
        user.is_active = False
        self.db.commit()
        logger.info("admin_deleted", user_id=str(admin_id), actor_id=str(actor.id))
