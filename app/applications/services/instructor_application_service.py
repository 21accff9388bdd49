from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.applications.models import ApprovalStatus, InstructorApplication
from app.applications.repositories.application_repository import InstructorApplicationRepository
from app.applications.schemas.application import (
    InstructorApplicationCreate,
    InstructorApplicationResponse,
    ReviewDecision,
)
from app.applications.services.approval import apply_decision
from app.auth.models.user import User, UserRole
from app.auth.permissions import Action, authorize
from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.core.schemas import PaginatedResponse, paginated_response

logger = structlog.get_logger(__name__)


class InstructorApplicationService:
    def __init__(self, db: Session):
        self.db = db
        self.applications = InstructorApplicationRepository(db)

    def _to_response(self, application: InstructorApplication) -> InstructorApplicationResponse:
        return InstructorApplicationResponse(
            id=application.id,
            user_id=application.user_id,
            applicant_name=application.user.full_name,
            applicant_email=application.user.email,
            motivation=application.motivation,
            expertise=application.expertise,
            linkedin_url=application.linkedin_url,
            portfolio_url=application.portfolio_url,
            status=application.status,
            admin_comment=application.admin_comment,
            reviewed_by_id=application.reviewed_by_id,
            reviewed_at=application.reviewed_at,
            created_at=application.created_at,
            updated_at=application.updated_at,
        )

    def _get_or_404(self, application_id: UUID) -> InstructorApplication:
        application = self.applications.get_by_id(application_id)
        if application is None:
            raise NotFoundError(
                f"Instructor application {application_id} not found", resource="application"
            )
        return application

    def submit(
        self, user: User, data: InstructorApplicationCreate
    ) -> InstructorApplicationResponse:
        if not authorize(user, Action.APPLY_INSTRUCTOR):
            raise ForbiddenError("Only students can apply to become instructors")
        if self.applications.exists_by_user_and_status(user.id, ApprovalStatus.PENDING):
            raise ConflictError("You already have a pending application", resource="application")

        application = InstructorApplication(
            user_id=user.id,
            motivation=data.motivation,
            expertise=data.expertise,
            linkedin_url=data.linkedin_url,
            portfolio_url=data.portfolio_url,
        )
        self.applications.add(application)
        self.db.commit()
        self.db.refresh(application)

        logger.info(
            "application_submitted", application_id=str(application.id), user_id=str(user.id)
        )
        return self._to_response(application)

    def has_pending_application(self, user: User) -> bool:
        return self.applications.exists_by_user_and_status(user.id, ApprovalStatus.PENDING)

    def get_my_application(self, user: User) -> InstructorApplicationResponse:
        application = self.applications.latest_by_user(user.id)
        if application is None:
            raise NotFoundError("You have not submitted an application", resource="application")
        return self._to_response(application)

    def list_applications(
        self, *, status: ApprovalStatus | None = None, page: int = 1, limit: int = 20
    ) -> PaginatedResponse[InstructorApplicationResponse]:
        items, total = self.applications.search(
            status=status, skip=(page - 1) * limit, limit=limit
        )
        return paginated_response(
            [self._to_response(a) for a in items], total=total, page=page, limit=limit
        )

    def get_application(self, application_id: UUID) -> InstructorApplicationResponse:
        return self._to_response(self._get_or_404(application_id))

    def pending_count(self) -> int:
        return self.applications.count_by_status(ApprovalStatus.PENDING)

    def review(
        self, reviewer: User, application_id: UUID, decision: ReviewDecision
    ) -> InstructorApplicationResponse:
        """Decide an application. Approval promotes the applicant in the same transaction."""
        application = self._get_or_404(application_id)
        apply_decision(application, decision.status, reviewer.id)
        application.admin_comment = decision.comment

        if application.status is ApprovalStatus.APPROVED:
            applicant = application.user
            applicant.role = UserRole.INSTRUCTOR
            logger.info("user_promoted_to_instructor", user_id=str(applicant.id))

        self.db.commit()
        self.db.refresh(application)

        logger.info(
            "application_reviewed",
            application_id=str(application.id),
            status=application.status.value,
            reviewer_id=str(reviewer.id),
        )
        return self._to_response(application)
