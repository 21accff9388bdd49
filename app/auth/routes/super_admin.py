from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import require_super_admin
from app.auth.models.user import User, UserRole
from app.auth.schemas.user import CreateStaffUserRequest, UserResponse
from app.auth.services.user_admin_service import UserAdminService
from app.db.session import get_db

router = APIRouter()


@router.post("/admins", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_admin(
    data: CreateStaffUserRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin),
) -> UserResponse:
    return UserAdminService(db).create_staff_user(data, UserRole.ADMIN)


@router.get("/admins", response_model=list[UserResponse])
async def list_admins(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin),
) -> list[UserResponse]:
    return UserAdminService(db).list_admins()


@router.delete("/admins/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_admin(
    admin_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin),
) -> None:
    UserAdminService(db).delete_admin(current_user, admin_id)


@router.post("/instructors", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_instructor(
    data: CreateStaffUserRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin),
) -> UserResponse:
    return UserAdminService(db).create_staff_user(data, UserRole.INSTRUCTOR)
