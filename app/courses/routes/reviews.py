from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.courses.schemas.review import (
    AverageRatingResponse,
    CourseRatingResponse,
    ReviewRequest,
    ReviewResponse,
)
from app.courses.services.review_service import ReviewService
from app.db.session import get_db

router = APIRouter()


@router.put("/courses/{course_id}/reviews", response_model=ReviewResponse)
async def create_or_update_review(
    course_id: UUID,
    data: ReviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewResponse:
    """Create the caller's review of a course, or replace it if one exists."""
    return ReviewService(db).create_or_update(course_id, data.rating, data.comment, current_user)


@router.get("/courses/{course_id}/reviews", response_model=list[ReviewResponse])
async def get_course_reviews(
    course_id: UUID, db: Session = Depends(get_db)
) -> list[ReviewResponse]:
    return ReviewService(db).get_course_reviews(course_id)


@router.get("/courses/{course_id}/reviews/me", response_model=ReviewResponse)
async def get_my_review(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewResponse:
    return ReviewService(db).get_my_review(course_id, current_user)


@router.get("/courses/{course_id}/reviews/average", response_model=AverageRatingResponse)
async def get_average_rating(
    course_id: UUID, db: Session = Depends(get_db)
) -> AverageRatingResponse:
    return ReviewService(db).get_average_rating(course_id)


@router.get("/courses/{course_id}/rating", response_model=CourseRatingResponse)
async def get_course_rating(course_id: UUID, db: Session = Depends(get_db)) -> CourseRatingResponse:
    return ReviewService(db).get_course_rating(course_id)


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    ReviewService(db).delete_review(review_id, current_user)
