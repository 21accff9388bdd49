from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.applications.models.approval import ApprovalStatus
from app.core.constants import APPEAL_REASON_MAX_LENGTH, APPLICATION_MOTIVATION_MAX_LENGTH
from app.core.datetime_utils import UTCDatetime


class InstructorApplicationCreate(BaseModel):
    motivation: str = Field(..., min_length=1, max_length=APPLICATION_MOTIVATION_MAX_LENGTH)
    expertise: str | None = None
    linkedin_url: str | None = Field(None, max_length=500)
    portfolio_url: str | None = Field(None, max_length=500)


class ReviewDecision(BaseModel):
    status: ApprovalStatus
    comment: str | None = Field(None, max_length=2000)


class InstructorApplicationResponse(BaseModel):
    id: UUID
    user_id: UUID
    applicant_name: str
    applicant_email: str
    motivation: str
    expertise: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    status: ApprovalStatus
    admin_comment: str | None = None
    reviewed_by_id: UUID | None = None
    reviewed_at: UTCDatetime | None = None
    created_at: UTCDatetime
    updated_at: UTCDatetime


class PendingCountResponse(BaseModel):
    count: int


class AppealCredentials(BaseModel):
    """Suspended users cannot hold tokens, so appeals authenticate with credentials"""

    email: EmailStr
    password: str


class SuspensionAppealCreate(AppealCredentials):
    reason: str = Field(..., max_length=APPEAL_REASON_MAX_LENGTH)


class SuspensionAppealResponse(BaseModel):
    id: UUID
    user_id: UUID
    user_email: str
    user_name: str
    reason: str
    status: ApprovalStatus
    admin_response: str | None = None
    reviewed_by_id: UUID | None = None
    reviewed_at: UTCDatetime | None = None
    created_at: UTCDatetime
