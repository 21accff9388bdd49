from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.applications.models import ApprovalStatus, SuspensionAppeal
from app.applications.repositories.application_repository import SuspensionAppealRepository
from app.applications.schemas.application import (
    AppealCredentials,
    ReviewDecision,
    SuspensionAppealCreate,
    SuspensionAppealResponse,
)
from app.applications.services.approval import apply_decision
from app.auth.models.user import User
from app.auth.services.auth_service import AuthService
from app.core.exceptions import ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class AppealService:
    def __init__(self, db: Session):
        self.db = db
        self.appeals = SuspensionAppealRepository(db)

    def _to_response(self, appeal: SuspensionAppeal) -> SuspensionAppealResponse:
        return SuspensionAppealResponse(
            id=appeal.id,
            user_id=appeal.user_id,
            user_email=appeal.user.email,
            user_name=appeal.user.full_name,
            reason=appeal.reason,
            status=appeal.status,
            admin_response=appeal.admin_response,
            reviewed_by_id=appeal.reviewed_by_id,
            reviewed_at=appeal.reviewed_at,
            created_at=appeal.created_at,
        )

    def _authenticate(self, credentials: AppealCredentials) -> User:
        return AuthService(self.db).verify_credentials(credentials.email, credentials.password)

    def submit(self, data: SuspensionAppealCreate) -> SuspensionAppealResponse:
        user = self._authenticate(data)
        if user.is_active:
            raise ValidationError("Only suspended accounts can submit an appeal")
        reason = data.reason.strip()
        if not reason:
            raise ValidationError("Appeal reason must not be blank", field="reason")
        if self.appeals.exists_by_user_and_status(user.id, ApprovalStatus.PENDING):
            raise ConflictError("You already have a pending appeal", resource="appeal")

        appeal = SuspensionAppeal(user_id=user.id, reason=reason)
        self.appeals.add(appeal)
        self.db.commit()
        self.db.refresh(appeal)

        logger.info("appeal_submitted", appeal_id=str(appeal.id), user_id=str(user.id))
        return self._to_response(appeal)

    def list_mine(self, credentials: AppealCredentials) -> list[SuspensionAppealResponse]:
        user = self._authenticate(credentials)
        return [self._to_response(a) for a in self.appeals.list_by_user(user.id)]

    def list_pending(self) -> list[SuspensionAppealResponse]:
        return [self._to_response(a) for a in self.appeals.list_pending()]

    def review(
        self, reviewer: User, appeal_id: UUID, decision: ReviewDecision
    ) -> SuspensionAppealResponse:
        """Decide an appeal. Approval reactivates the account in the same transaction."""
        appeal = self.appeals.get_by_id(appeal_id)
        if appeal is None:
            raise NotFoundError(f"Appeal {appeal_id} not found", resource="appeal")

        apply_decision(appeal, decision.status, reviewer.id)
        appeal.admin_response = decision.comment

        if appeal.status is ApprovalStatus.APPROVED:
            appeal.user.is_active = True
            logger.info("user_reactivated", user_id=str(appeal.user_id))

        self.db.commit()
        self.db.refresh(appeal)

        logger.info(
            "appeal_reviewed",
            appeal_id=str(appeal.id),
            status=appeal.status.value,
            reviewer_id=str(reviewer.id),
        )
        return self._to_response(appeal)
