from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.courses.schemas.progress import (
    EnrollmentProgressSummary,
    LessonProgressResponse,
    ProgressUpdateResponse,
    WatchProgressUpdate,
)
from app.courses.services.progress_service import ProgressService
from app.db.session import get_db

router = APIRouter()


@router.get("/enrollments/{enrollment_id}/progress", response_model=EnrollmentProgressSummary)
async def get_enrollment_progress(
    enrollment_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EnrollmentProgressSummary:
    """Overall progress for an enrollment plus every lesson record."""
    return ProgressService(db).get_progress_by_enrollment(enrollment_id, current_user)


@router.get(
    "/enrollments/{enrollment_id}/lessons/{lesson_id}/progress",
    response_model=LessonProgressResponse,
)
async def get_lesson_progress(
    enrollment_id: UUID,
    lesson_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LessonProgressResponse:
    return ProgressService(db).get_progress(enrollment_id, lesson_id, current_user)


@router.put(
    "/enrollments/{enrollment_id}/lessons/{lesson_id}/progress",
    response_model=LessonProgressResponse,
)
async def update_watch_progress(
    enrollment_id: UUID,
    lesson_id: UUID,
    data: WatchProgressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LessonProgressResponse:
    """Save how long the lesson was watched and where playback should resume."""
    return ProgressService(db).update_watch_progress(enrollment_id, lesson_id, data, current_user)


@router.post(
    "/enrollments/{enrollment_id}/lessons/{lesson_id}/complete",
    response_model=ProgressUpdateResponse,
)
async def mark_lesson_completed(
    enrollment_id: UUID,
    lesson_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProgressUpdateResponse:
    """
    Mark a lesson as completed.

    Completing the last lesson of a course stamps the enrollment as completed
    and issues the certificate.
    """
    return ProgressService(db).mark_lesson_completed(enrollment_id, lesson_id, current_user)


@router.post(
    "/enrollments/{enrollment_id}/lessons/{lesson_id}/incomplete",
    response_model=ProgressUpdateResponse,
)
async def mark_lesson_incomplete(
    enrollment_id: UUID,
    lesson_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProgressUpdateResponse:
    return ProgressService(db).mark_lesson_incomplete(enrollment_id, lesson_id, current_user)
