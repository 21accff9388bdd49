from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.applications.models.approval import ApprovalStatus
from app.applications.schemas.application import (
    InstructorApplicationCreate,
    InstructorApplicationResponse,
    PendingCountResponse,
    ReviewDecision,
)
from app.applications.services.instructor_application_service import (
    InstructorApplicationService,
)
from app.auth.dependencies import RequirePermission, get_current_user
from app.auth.models.user import User
from app.auth.permissions import Action
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.core.schemas import PaginatedResponse
from app.db.session import get_db

router = APIRouter()
admin_router = APIRouter()

require_application_reviewer = RequirePermission(Action.REVIEW_APPLICATIONS)


@router.post(
    "/instructor-applications",
    response_model=InstructorApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    data: InstructorApplicationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InstructorApplicationResponse:
    """Apply to become an instructor. Only one pending application per user."""
    return InstructorApplicationService(db).submit(current_user, data)


@router.get("/instructor-applications/me", response_model=InstructorApplicationResponse)
async def get_my_application(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InstructorApplicationResponse:
    return InstructorApplicationService(db).get_my_application(current_user)


@router.get("/instructor-applications/check", response_model=bool)
async def has_pending_application(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> bool:
    return InstructorApplicationService(db).has_pending_application(current_user)


@admin_router.get(
    "/instructor-applications",
    response_model=PaginatedResponse[InstructorApplicationResponse],
)
async def list_applications(
    status_filter: ApprovalStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_application_reviewer),
) -> PaginatedResponse[InstructorApplicationResponse]:
    return InstructorApplicationService(db).list_applications(
        status=status_filter, page=page, limit=limit
    )


@admin_router.get("/instructor-applications/pending-count", response_model=PendingCountResponse)
async def get_pending_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_application_reviewer),
) -> PendingCountResponse:
    return PendingCountResponse(count=InstructorApplicationService(db).pending_count())


@admin_router.get(
    "/instructor-applications/{application_id}", response_model=InstructorApplicationResponse
)
async def get_application(
    application_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_application_reviewer),
) -> InstructorApplicationResponse:
    return InstructorApplicationService(db).get_application(application_id)


@admin_router.put(
    "/instructor-applications/{application_id}/review",
    response_model=InstructorApplicationResponse,
)
async def review_application(
    application_id: UUID,
    decision: ReviewDecision,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_application_reviewer),
) -> InstructorApplicationResponse:
    """Approve or reject a pending application. Approval makes the user an instructor."""
    return InstructorApplicationService(db).review(current_user, application_id, decision)
