from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.core.constants import REVIEW_COMMENT_MAX_LENGTH, REVIEW_MAX_RATING, REVIEW_MIN_RATING
from app.core.exceptions import (
    ConflictError,
    NotEnrolledError,
    ReviewNotFoundError,
    UnauthorizedReviewAccessError,
    ValidationError,
)
from app.courses.models import Review
from app.courses.repositories.enrollment_repository import EnrollmentRepository
from app.courses.repositories.review_repository import ReviewRepository
from app.courses.schemas.review import (
    AverageRatingResponse,
    CourseRatingResponse,
    ReviewResponse,
)
from app.courses.services.course_service import get_course_or_404

logger = structlog.get_logger(__name__)


def _validate(rating: object, comment: str | None) -> None:
    if (
        isinstance(rating, bool)
        or not isinstance(rating, int)
        or not REVIEW_MIN_RATING <= rating <= REVIEW_MAX_RATING
    ):
        raise ValidationError(
            f"Rating must be an integer between {REVIEW_MIN_RATING} and {REVIEW_MAX_RATING}",
            field="rating",
        )
    if comment is not None and len(comment) > REVIEW_COMMENT_MAX_LENGTH:
        raise ValidationError(
            f"Comment must be at most {REVIEW_COMMENT_MAX_LENGTH} characters", field="comment"
        )


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.reviews = ReviewRepository(db)

    def _to_response(self, review: Review) -> ReviewResponse:
        return ReviewResponse(
            id=review.id,
            user_id=review.user_id,
            course_id=review.course_id,
            reviewer_name=review.user.full_name,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )

    def create_or_update(
        self, course_id: UUID, rating: int, comment: str | None, user: User
    ) -> ReviewResponse:
        """Write the caller's single review of a course, replacing any earlier one."""
        _validate(rating, comment)
        course = get_course_or_404(self.db, course_id)

        if course.instructor_id == user.id:
            raise UnauthorizedReviewAccessError("Instructors cannot review their own course")
        if not EnrollmentRepository(self.db).exists_by_user_and_course(user.id, course.id):
            raise NotEnrolledError("You must be enrolled in this course to review it")

        review = self.reviews.get_by_user_and_course(user.id, course.id)
        if review is not None:
            review.rating = rating
            review.comment = comment
            review.updated_at = datetime.now(UTC)
            event = "review_updated"
        else:
            review = Review(user_id=user.id, course_id=course.id, rating=rating, comment=comment)
            try:
                with self.db.begin_nested():
                    self.db.add(review)
                    self.db.flush()
            except IntegrityError as e:
                raise ConflictError(
                    "A review for this course was submitted concurrently", resource="review"
                ) from e
            event = "review_created"

        self.db.commit()
        self.db.refresh(review)
        logger.info(event, review_id=str(review.id), course_id=str(course.id), rating=rating)
        return self._to_response(review)

    def get_my_review(self, course_id: UUID, user: User) -> ReviewResponse:
        review = self.reviews.get_by_user_and_course(user.id, course_id)
        if review is None:
            raise ReviewNotFoundError("You have not reviewed this course")
        return self._to_response(review)

    def get_average_rating(self, course_id: UUID) -> AverageRatingResponse:
        course = get_course_or_404(self.db, course_id)
        average, _ = self.reviews.rating_stats(course.id)
        return AverageRatingResponse(
            course_id=course.id,
            average_rating=round(average, 1) if average is not None else None,
        )

    def get_course_rating(self, course_id: UUID) -> CourseRatingResponse:
        course = get_course_or_404(self.db, course_id)
        average, total = self.reviews.rating_stats(course.id)
        return CourseRatingResponse(
            course_id=course.id,
            course_title=course.title,
            average_rating=round(average, 1) if average is not None else None,
            total_reviews=total,
        )

    def get_course_reviews(self, course_id: UUID) -> list[ReviewResponse]:
        course = get_course_or_404(self.db, course_id)
        return [self._to_response(r) for r in self.reviews.list_by_course(course.id)]

    def delete_review(self, review_id: UUID, user: User) -> None:
        review = self.reviews.get_by_id(review_id)
        if review is None:
            raise ReviewNotFoundError(f"Review {review_id} not found")
        if review.user_id != user.id:
            raise UnauthorizedReviewAccessError()

        self.reviews.delete(review)
        self.db.commit()
        logger.info("review_deleted", review_id=str(review_id), user_id=str(user.id))
