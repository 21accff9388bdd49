from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.dependencies import require_admin
from app.auth.models.user import User, UserRole
from app.auth.schemas.user import UserResponse, UserStatusResponse
from app.auth.services.user_admin_service import UserAdminService
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.core.schemas import PaginatedResponse
from app.db.session import get_db

router = APIRouter()


@router.get("/users", response_model=PaginatedResponse[UserResponse])
async def list_users(
    role: UserRole | None = None,
    is_active: bool | None = None,
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> PaginatedResponse[UserResponse]:
    return UserAdminService(db).list_users(
        role=role, is_active=is_active, search=search, page=page, limit=limit
    )


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UserResponse:
    return UserAdminService(db).get_user(user_id)


@router.patch("/users/{user_id}/toggle-status", response_model=UserStatusResponse)
async def toggle_user_status(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UserStatusResponse:
    """Suspend an active account or reactivate a suspended one."""
    return UserAdminService(db).toggle_status(current_user, user_id)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> None:
    UserAdminService(db).soft_delete(current_user, user_id)
