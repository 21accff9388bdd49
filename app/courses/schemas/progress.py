from uuid import UUID

from pydantic import BaseModel, Field

from app.core.datetime_utils import UTCDatetime


class WatchProgressUpdate(BaseModel):
    watched_seconds: int = Field(..., ge=0)
    last_position_seconds: int = Field(..., ge=0)


class LessonProgressResponse(BaseModel):
    id: UUID
    enrollment_id: UUID
    lesson_id: UUID
    watched_seconds: int = 0
    last_position_seconds: int = 0
    completed: bool
    completed_at: UTCDatetime | None = None
    updated_at: UTCDatetime

    class Config:
        from_attributes = True


class LessonProgressWithLesson(LessonProgressResponse):
    lesson_title: str
    section_id: UUID


class ProgressUpdateResponse(BaseModel):
    """Result of marking a lesson, with the enrollment-wide figures it changed"""

    progress: LessonProgressResponse
    progress_percentage: float
    course_completed: bool
    certificate_number: str | None = None


class EnrollmentProgressSummary(BaseModel):
    enrollment_id: UUID
    course_id: UUID
    total_lessons: int
    completed_lessons: int
    progress_percentage: float
    completed_at: UTCDatetime | None = None
    lessons: list[LessonProgressWithLesson] = []
