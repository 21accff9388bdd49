"""Course schemas."""

from app.courses.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.courses.schemas.certificate import CertificateResponse, CertificateVerifyResponse
from app.courses.schemas.course import (
    CourseCreate,
    CourseDetailResponse,
    CourseResponse,
    CourseUpdate,
    LessonCreate,
    LessonResponse,
    LessonSummary,
    LessonUpdate,
    ReorderRequest,
    SectionCreate,
    SectionResponse,
    SectionUpdate,
    SectionWithLessonsResponse,
)
from app.courses.schemas.enrollment import (
    CompleteEnrollmentRequest,
    CourseEnrollmentResponse,
    EnrollmentResponse,
    PaymentIntentResponse,
)
from app.courses.schemas.progress import (
    EnrollmentProgressSummary,
    LessonProgressResponse,
    LessonProgressWithLesson,
    ProgressUpdateResponse,
    WatchProgressUpdate,
)
from app.courses.schemas.review import (
    AverageRatingResponse,
    CourseRatingResponse,
    ReviewRequest,
    ReviewResponse,
)

__all__ = [
    # Catalog schemas
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CourseCreate",
    "CourseUpdate",
    "CourseResponse",
    "CourseDetailResponse",
    "SectionCreate",
    "SectionUpdate",
    "SectionResponse",
    "SectionWithLessonsResponse",
    "LessonCreate",
    "LessonUpdate",
    "LessonSummary",
    "LessonResponse",
    "ReorderRequest",
    # Enrollment schemas
    "PaymentIntentResponse",
    "CompleteEnrollmentRequest",
    "EnrollmentResponse",
    "CourseEnrollmentResponse",
    # Progress schemas
    "LessonProgressResponse",
    "LessonProgressWithLesson",
    "ProgressUpdateResponse",
    "WatchProgressUpdate",
    "EnrollmentProgressSummary",
    # Certificate schemas
    "CertificateResponse",
    "CertificateVerifyResponse",
    # Review schemas
    "ReviewRequest",
    "ReviewResponse",
    "AverageRatingResponse",
    "CourseRatingResponse",
]
