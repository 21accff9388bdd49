from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user, get_optional_current_user
from app.auth.models.user import User
from app.courses.schemas.course import (
    ReorderRequest,
    SectionCreate,
    SectionResponse,
    SectionUpdate,
    SectionWithLessonsResponse,
)
from app.courses.services.section_service import SectionService
from app.db.session import get_db

router = APIRouter()


@router.get("/courses/{course_id}/sections", response_model=list[SectionResponse])
async def list_sections(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_current_user),
) -> list[SectionResponse]:
    return SectionService(db).list_sections(course_id, current_user)


@router.post(
    "/courses/{course_id}/sections",
    response_model=SectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_section(
    course_id: UUID,
    data: SectionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SectionResponse:
    """Append a section at the end of the course."""
    return SectionService(db).create_section(current_user, course_id, data)


@router.put("/courses/{course_id}/sections/reorder", response_model=list[SectionResponse])
async def reorder_sections(
    course_id: UUID,
    data: ReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[SectionResponse]:
    return SectionService(db).reorder_sections(current_user, course_id, data.ordered_ids)


@router.get("/sections/{section_id}", response_model=SectionWithLessonsResponse)
async def get_section(
    section_id: UUID,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_current_user),
) -> SectionWithLessonsResponse:
    return SectionService(db).get_section(section_id, current_user)


@router.put("/sections/{section_id}", response_model=SectionResponse)
async def update_section(
    section_id: UUID,
    data: SectionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SectionResponse:
    return SectionService(db).update_section(current_user, section_id, data)


@router.delete("/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_section(
    section_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    SectionService(db).delete_section(current_user, section_id)
