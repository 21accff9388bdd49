from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.auth.models.user import UserRole
from app.core.datetime_utils import UTCDatetime


class UserResponse(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: UserRole
    is_active: bool
    bio: str | None = None
    avatar_url: str | None = None
    created_at: UTCDatetime

    class Config:
        from_attributes = True


class UpdateProfileRequest(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=2000)
    avatar_url: str | None = Field(None, max_length=500)


class CreateStaffUserRequest(BaseModel):
    """Account created by a super admin (admins and instructors)"""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class UserStatusResponse(BaseModel):
    id: UUID
    is_active: bool
    message: str
