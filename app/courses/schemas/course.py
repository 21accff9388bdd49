from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.datetime_utils import UTCDatetime
from app.courses.models import CourseStatus, LessonType


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(default=Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    thumbnail_url: str | None = None
    category_id: UUID | None = None
    # Admins may create a course on behalf of an instructor
    instructor_id: UUID | None = None


class CourseUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    thumbnail_url: str | None = None
    category_id: UUID | None = None


class CourseResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    price: float
    is_free: bool
    thumbnail_url: str | None = None
    status: CourseStatus
    instructor_id: UUID
    instructor_name: str
    category_id: UUID | None = None
    category_name: str | None = None
    total_sections: int = 0
    total_lessons: int = 0
    average_rating: float | None = None
    created_at: UTCDatetime
    updated_at: UTCDatetime


class SectionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class SectionUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class SectionResponse(BaseModel):
    id: UUID
    course_id: UUID
    title: str
    description: str | None = None
    order_index: int
    total_lessons: int = 0
    created_at: UTCDatetime
    updated_at: UTCDatetime


class LessonCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: LessonType = LessonType.TEXT
    content: str | None = None
    duration_minutes: int = Field(default=0, ge=0)
    is_free: bool = False
    video_url: str | None = Field(None, max_length=500)
    file_url: str | None = Field(None, max_length=500)
    quiz_data: str | None = None
    thumbnail_url: str | None = Field(None, max_length=500)


class LessonUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    type: LessonType | None = None
    content: str | None = None
    duration_minutes: int | None = Field(None, ge=0)
    is_free: bool | None = None
    video_url: str | None = Field(None, max_length=500)
    file_url: str | None = Field(None, max_length=500)
    quiz_data: str | None = None
    thumbnail_url: str | None = Field(None, max_length=500)


class LessonSummary(BaseModel):
    """Lesson outline entry, visible without enrollment"""

    id: UUID
    section_id: UUID
    title: str
    type: LessonType
    duration_minutes: int
    order_index: int
    is_free: bool
    thumbnail_url: str | None = None

    class Config:
        from_attributes = True


class LessonResponse(LessonSummary):
    content: str | None = None
    video_url: str | None = None
    file_url: str | None = None
    quiz_data: str | None = None
    created_at: UTCDatetime
    updated_at: UTCDatetime


class SectionWithLessonsResponse(SectionResponse):
    lessons: list[LessonSummary] = []


class CourseDetailResponse(CourseResponse):
    sections: list[SectionWithLessonsResponse] = []


class ReorderRequest(BaseModel):
    """Complete list of child ids in their new order"""

    ordered_ids: list[UUID] = Field(..., min_length=1)
