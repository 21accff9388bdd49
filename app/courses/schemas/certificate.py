from uuid import UUID

from pydantic import BaseModel

from app.core.datetime_utils import UTCDatetime


class CertificateResponse(BaseModel):
    id: UUID
    certificate_number: str
    user_id: UUID
    course_id: UUID
    course_title: str
    student_name: str
    instructor_name: str
    issued_at: UTCDatetime
    completion_date: UTCDatetime


class CertificateVerifyResponse(BaseModel):
    valid: bool
    certificate_number: str
    student_name: str
    course_title: str
    instructor_name: str
    completion_date: UTCDatetime
    issued_at: UTCDatetime
