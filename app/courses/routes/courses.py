from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.auth.dependencies import RequirePermission, get_current_user, get_optional_current_user
from app.auth.models.user import User
from app.auth.permissions import Action
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.core.schemas import PaginatedResponse
from app.core.storage import StorageBackend, get_storage
from app.courses.schemas.course import (
    CourseCreate,
    CourseDetailResponse,
    CourseResponse,
    CourseUpdate,
)
from app.courses.services.course_service import CourseService
from app.db.session import get_db

router = APIRouter()

require_author = RequirePermission(Action.CREATE_COURSE)


@router.get("/courses", response_model=PaginatedResponse[CourseResponse])
async def list_courses(
    category_id: UUID | None = None,
    instructor_id: UUID | None = None,
    search: str | None = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> PaginatedResponse[CourseResponse]:
    """Published catalog, newest first."""
    return CourseService(db).list_published(
        category_id=category_id,
        instructor_id=instructor_id,
        title=search,
        page=page,
        limit=limit,
    )


@router.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    data: CourseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_author),
) -> CourseResponse:
    return CourseService(db).create_course(current_user, data)


@router.get("/courses/mine", response_model=list[CourseResponse])
async def list_my_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_author),
) -> list[CourseResponse]:
    """Courses taught by the current instructor, in every status."""
    return CourseService(db).list_mine(current_user)


@router.get("/courses/{course_id}", response_model=CourseDetailResponse)
async def get_course(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_current_user),
) -> CourseDetailResponse:
    return CourseService(db).get_course(course_id, current_user)


@router.put("/courses/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: UUID,
    data: CourseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CourseResponse:
    return CourseService(db).update_course(current_user, course_id, data)


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    CourseService(db).delete_course(current_user, course_id)


@router.patch("/courses/{course_id}/publish", response_model=CourseResponse)
async def publish_course(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CourseResponse:
    return CourseService(db).publish_course(current_user, course_id)


@router.patch("/courses/{course_id}/archive", response_model=CourseResponse)
async def archive_course(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CourseResponse:
    return CourseService(db).archive_course(current_user, course_id)


@router.post("/courses/{course_id}/thumbnail", response_model=CourseResponse)
async def upload_course_thumbnail(
    course_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    current_user: User = Depends(get_current_user),
) -> CourseResponse:
    """Upload a thumbnail image for a course (owner or admin)."""
    file_content = await file.read()
    return CourseService(db).upload_thumbnail(
        current_user,
        course_id,
        file_content=file_content,
        filename=file.filename or "thumbnail.jpg",
        content_type=file.content_type,
        storage=storage,
    )
