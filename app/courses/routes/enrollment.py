from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import RequirePermission, get_current_user
from app.auth.models.user import User
from app.auth.permissions import Action
from app.courses.schemas.enrollment import (
    CompleteEnrollmentRequest,
    CourseEnrollmentResponse,
    EnrollmentResponse,
    PaymentIntentResponse,
)
from app.courses.services.enrollment_service import EnrollmentService
from app.db.session import get_db

router = APIRouter()

require_enroll = RequirePermission(Action.ENROLL)


@router.post("/courses/{course_id}/payment", response_model=PaymentIntentResponse)
async def initiate_payment(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_enroll),
) -> PaymentIntentResponse:
    """Open a payment for a paid course and return its reference."""
    return EnrollmentService(db).initiate_payment(course_id, current_user)


@router.post(
    "/courses/{course_id}/enroll/complete",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def complete_enrollment(
    course_id: UUID,
    data: CompleteEnrollmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_enroll),
) -> EnrollmentResponse:
    """Enroll in a paid course once its payment reference is confirmed."""
    return EnrollmentService(db).complete_enrollment(
        course_id, data.payment_reference, current_user
    )


@router.post(
    "/courses/{course_id}/enroll/free",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def enroll_free(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_enroll),
) -> EnrollmentResponse:
    return EnrollmentService(db).enroll_free(course_id, current_user)


@router.get("/courses/{course_id}/enrollment/check", response_model=bool)
async def check_enrollment(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> bool:
    return EnrollmentService(db).is_enrolled(course_id, current_user.id)


@router.get("/courses/{course_id}/enrollment", response_model=EnrollmentResponse)
async def get_enrollment(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EnrollmentResponse:
    return EnrollmentService(db).get_enrollment(course_id, current_user)


@router.delete("/courses/{course_id}/enrollment", status_code=status.HTTP_204_NO_CONTENT)
async def unenroll(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    EnrollmentService(db).unenroll(course_id, current_user)


@router.get("/enrollments/me", response_model=list[EnrollmentResponse])
async def get_my_enrollments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[EnrollmentResponse]:
    """All courses the current user is enrolled in, with progress."""
    return EnrollmentService(db).get_my_enrollments(current_user)


@router.get("/courses/{course_id}/enrollments", response_model=list[CourseEnrollmentResponse])
async def get_course_enrollments(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CourseEnrollmentResponse]:
    """Students enrolled in a course (course instructor or admin)."""
    return EnrollmentService(db).get_course_enrollments(current_user, course_id)
