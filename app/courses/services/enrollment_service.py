from decimal import Decimal
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.auth.permissions import Action, authorize
from app.core.exceptions import (
    AlreadyEnrolledError,
    EnrollmentNotFoundError,
    ForbiddenError,
    ValidationError,
)
from app.courses.models import Course, CourseStatus, Enrollment
from app.courses.repositories.enrollment_repository import EnrollmentRepository
from app.courses.repositories.progress_repository import ProgressRepository
from app.courses.schemas.enrollment import (
    CourseEnrollmentResponse,
    EnrollmentResponse,
    PaymentIntentResponse,
)
from app.courses.services.course_service import get_course_or_404
from app.courses.services.payment_service import PaymentGateway, get_payment_gateway
from app.courses.services.progress_service import ProgressService

logger = structlog.get_logger(__name__)


class EnrollmentService:
    def __init__(self, db: Session, gateway: PaymentGateway | None = None):
        self.db = db
        self.gateway = gateway or get_payment_gateway()
        self.enrollments = EnrollmentRepository(db)

    def _get_enrollable_course(self, course_id: UUID, user: User) -> Course:
        course = get_course_or_404(self.db, course_id)
        if course.status is CourseStatus.DRAFT:
            raise ValidationError("Course is not open for enrollment", field="course_id")
        if course.instructor_id == user.id:
            raise ValidationError("Instructors cannot enroll in their own course")
        return course

    def _to_response(self, enrollment: Enrollment) -> EnrollmentResponse:
        completed, total, percentage = ProgressService(self.db).calculate_progress(enrollment)
        return EnrollmentResponse(
            id=enrollment.id,
            user_id=enrollment.user_id,
            course_id=enrollment.course_id,
            course_title=enrollment.course.title,
            enrolled_at=enrollment.enrolled_at,
            completed_at=enrollment.completed_at,
            payment_reference=enrollment.payment_reference,
            payment_method=enrollment.payment_method,
            amount_paid=float(enrollment.amount_paid),
            progress_percentage=percentage,
            completed_lessons=completed,
            total_lessons=total,
        )

    def _create_enrollment(
        self,
        course: Course,
        user: User,
        *,
        payment_reference: str | None,
        payment_method: str | None,
        amount_paid: Decimal,
    ) -> Enrollment:
        if self.enrollments.exists_by_user_and_course(user.id, course.id):
            raise AlreadyEnrolledError(user.id, course.id)

        enrollment = Enrollment(
            user_id=user.id,
            course_id=course.id,
            payment_reference=payment_reference,
            payment_method=payment_method,
            amount_paid=amount_paid,
        )
        try:
            with self.db.begin_nested():
                self.db.add(enrollment)
                self.db.flush()
        except IntegrityError as e:
            raise AlreadyEnrolledError(user.id, course.id) from e
        self.db.commit()
        self.db.refresh(enrollment)

        logger.info(
            "enrollment_created",
            enrollment_id=str(enrollment.id),
            user_id=str(user.id),
            course_id=str(course.id),
            amount_paid=str(amount_paid),
        )
        return enrollment

    def initiate_payment(self, course_id: UUID, payer: User) -> PaymentIntentResponse:
        """Open a payment for a paid course. No enrollment is created here."""
        course = self._get_enrollable_course(course_id, payer)
        if course.is_free:
            raise ValidationError("Course is free, use free enrollment instead")
        if self.enrollments.exists_by_user_and_course(payer.id, course.id):
            raise AlreadyEnrolledError(payer.id, course.id)

        intent = self.gateway.create_payment(Decimal(course.price))
        logger.info(
            "payment_initiated",
            course_id=str(course.id),
            user_id=str(payer.id),
            reference=intent.reference,
        )
        return PaymentIntentResponse(
            reference=intent.reference, amount=float(intent.amount), method=intent.method
        )

    def complete_enrollment(
        self, course_id: UUID, payment_reference: str, payer: User
    ) -> EnrollmentResponse:
        course = self._get_enrollable_course(course_id, payer)
        if course.is_free:
            raise ValidationError("Course is free, use free enrollment instead")
        self.gateway.verify_reference(payment_reference)

        enrollment = self._create_enrollment(
            course,
            payer,
            payment_reference=payment_reference.strip(),
            payment_method=self.gateway.method,
            amount_paid=Decimal(course.price),
        )
        return self._to_response(enrollment)

    def enroll_free(self, course_id: UUID, user: User) -> EnrollmentResponse:
        course = self._get_enrollable_course(course_id, user)
        if not course.is_free:
            raise ValidationError("Course is not free, payment is required")

        enrollment = self._create_enrollment(
            course, user, payment_reference=None, payment_method=None, amount_paid=Decimal("0.00")
        )
        return self._to_response(enrollment)

    def is_enrolled(self, course_id: UUID, user_id: UUID) -> bool:
        return self.enrollments.exists_by_user_and_course(user_id, course_id)

    def get_my_enrollments(self, user: User) -> list[EnrollmentResponse]:
        return [self._to_response(e) for e in self.enrollments.list_by_user(user.id)]

    def get_enrollment(self, course_id: UUID, user: User) -> EnrollmentResponse:
        enrollment = self.enrollments.get_by_user_and_course(user.id, course_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(f"You are not enrolled in course {course_id}")
        return self._to_response(enrollment)

    def get_course_enrollments(
        self, actor: User, course_id: UUID
    ) -> list[CourseEnrollmentResponse]:
        course = get_course_or_404(self.db, course_id)
        if not authorize(actor, Action.VIEW_COURSE_ENROLLMENTS, course):
            raise ForbiddenError("Only the course instructor or an admin can view enrollments")

        return [
            CourseEnrollmentResponse(
                **self._to_response(e).model_dump(),
                student_name=e.user.full_name,
                student_email=e.user.email,
            )
            for e in self.enrollments.list_by_course(course.id)
        ]

    def unenroll(self, course_id: UUID, user: User) -> None:
        """Drop an enrollment and its progress. An issued certificate is kept."""
        enrollment = self.enrollments.get_by_user_and_course(user.id, course_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(f"You are not enrolled in course {course_id}")

        ProgressRepository(self.db).delete_by_enrollments([enrollment.id])
        self.enrollments.delete(enrollment)
        self.db.commit()

        logger.info("enrollment_deleted", user_id=str(user.id), course_id=str(course_id))
