from uuid import UUID

from pydantic import BaseModel

from app.core.datetime_utils import UTCDatetime


class ReviewRequest(BaseModel):
    # Range and length are enforced by ReviewService so they answer with a 400
    rating: int
    comment: str | None = None


class ReviewResponse(BaseModel):
    id: UUID
    user_id: UUID
    course_id: UUID
    reviewer_name: str
    rating: int
    comment: str | None = None
    created_at: UTCDatetime
    updated_at: UTCDatetime


class AverageRatingResponse(BaseModel):
    course_id: UUID
    average_rating: float | None = None


class CourseRatingResponse(BaseModel):
    course_id: UUID
    course_title: str
    average_rating: float | None = None
    total_reviews: int
