from uuid import UUID

from pydantic import BaseModel, Field

from app.core.datetime_utils import UTCDatetime


class PaymentIntentResponse(BaseModel):
    reference: str
    amount: float
    method: str


class CompleteEnrollmentRequest(BaseModel):
    payment_reference: str = Field(..., min_length=1, max_length=100)


class EnrollmentResponse(BaseModel):
    id: UUID
    user_id: UUID
    course_id: UUID
    course_title: str
    enrolled_at: UTCDatetime
    completed_at: UTCDatetime | None = None
    payment_reference: str | None = None
    payment_method: str | None = None
    amount_paid: float
    progress_percentage: float
    completed_lessons: int
    total_lessons: int


class CourseEnrollmentResponse(EnrollmentResponse):
    """Enrollment as seen by the course instructor"""

    student_name: str
    student_email: str
