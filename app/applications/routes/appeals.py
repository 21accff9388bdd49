from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.applications.schemas.application import (
    AppealCredentials,
    ReviewDecision,
    SuspensionAppealCreate,
    SuspensionAppealResponse,
)
from app.applications.services.appeal_service import AppealService
from app.auth.dependencies import RequirePermission
from app.auth.models.user import User
from app.auth.permissions import Action
from app.db.session import get_db

router = APIRouter()
admin_router = APIRouter()

require_appeal_reviewer = RequirePermission(Action.REVIEW_APPEALS)


@router.post(
    "/appeals", response_model=SuspensionAppealResponse, status_code=status.HTTP_201_CREATED
)
async def submit_appeal(
    data: SuspensionAppealCreate, db: Session = Depends(get_db)
) -> SuspensionAppealResponse:
    """
    Appeal an account suspension.

    Suspended users cannot obtain a token, so the request carries the
    account's email and password instead.
    """
    return AppealService(db).submit(data)


@router.post("/appeals/mine", response_model=list[SuspensionAppealResponse])
async def list_my_appeals(
    credentials: AppealCredentials, db: Session = Depends(get_db)
) -> list[SuspensionAppealResponse]:
    return AppealService(db).list_mine(credentials)


@admin_router.get("/appeals/pending", response_model=list[SuspensionAppealResponse])
async def list_pending_appeals(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_appeal_reviewer),
) -> list[SuspensionAppealResponse]:
    return AppealService(db).list_pending()


@admin_router.put("/appeals/{appeal_id}/review", response_model=SuspensionAppealResponse)
async def review_appeal(
    appeal_id: UUID,
    decision: ReviewDecision,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_appeal_reviewer),
) -> SuspensionAppealResponse:
    """Approve or reject an appeal. Approval reactivates the account."""
    return AppealService(db).review(current_user, appeal_id, decision)
