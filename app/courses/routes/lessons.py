from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user, get_optional_current_user
from app.auth.models.user import User
from app.core.storage import StorageBackend, get_storage
from app.courses.schemas.course import (
    LessonCreate,
    LessonResponse,
    LessonSummary,
    LessonUpdate,
    ReorderRequest,
)
from app.courses.services.lesson_service import LessonService
from app.db.session import get_db

router = APIRouter()


@router.get("/sections/{section_id}/lessons", response_model=list[LessonSummary])
async def list_lessons(
    section_id: UUID,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_current_user),
) -> list[LessonSummary]:
    return LessonService(db).list_lessons(section_id, current_user)


@router.post(
    "/sections/{section_id}/lessons",
    response_model=LessonResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_lesson(
    section_id: UUID,
    data: LessonCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LessonResponse:
    return LessonService(db).create_lesson(current_user, section_id, data)


@router.put("/sections/{section_id}/lessons/reorder", response_model=list[LessonSummary])
async def reorder_lessons(
    section_id: UUID,
    data: ReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[LessonSummary]:
    return LessonService(db).reorder_lessons(current_user, section_id, data.ordered_ids)


@router.get("/lessons/{lesson_id}", response_model=LessonResponse)
async def get_lesson(
    lesson_id: UUID,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_current_user),
) -> LessonResponse:
    """Full lesson content: free lessons are public, others need enrollment."""
    return LessonService(db).get_lesson(lesson_id, current_user)


@router.put("/lessons/{lesson_id}", response_model=LessonResponse)
async def update_lesson(
    lesson_id: UUID,
    data: LessonUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LessonResponse:
    return LessonService(db).update_lesson(current_user, lesson_id, data)


@router.delete("/lessons/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lesson(
    lesson_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    LessonService(db).delete_lesson(current_user, lesson_id)


@router.post("/lessons/{lesson_id}/media", response_model=LessonResponse)
async def upload_lesson_media(
    lesson_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    current_user: User = Depends(get_current_user),
) -> LessonResponse:
    """Upload a video or PDF for a lesson."""
    file_content = await file.read()
    return LessonService(db).upload_media(
        current_user,
        lesson_id,
        file_content=file_content,
        filename=file.filename or "upload",
        content_type=file.content_type,
        storage=storage,
    )
