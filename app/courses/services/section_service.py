from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.core.exceptions import SectionNotFoundError
from app.courses.models import Section
from app.courses.repositories.course_repository import LessonRepository, SectionRepository
from app.courses.repositories.progress_repository import ProgressRepository
from app.courses.schemas.course import (
    LessonSummary,
    SectionCreate,
    SectionResponse,
    SectionUpdate,
    SectionWithLessonsResponse,
)
from app.courses.services.course_service import ensure_can_manage, ensure_visible, get_course_or_404
from app.courses.services.ordering import apply_order

logger = structlog.get_logger(__name__)


class SectionService:
    def __init__(self, db: Session):
        self.db = db
        self.sections = SectionRepository(db)
        self.lessons = LessonRepository(db)

    def _get_or_404(self, section_id: UUID) -> Section:
        section = self.sections.get_by_id(section_id)
        if section is None:
            raise SectionNotFoundError(section_id)
        return section

    def _to_response(self, section: Section, total_lessons: int | None = None) -> SectionResponse:
        if total_lessons is None:
            total_lessons = self.lessons.count_by_section(section.id)
        return SectionResponse(
            id=section.id,
            course_id=section.course_id,
            title=section.title,
            description=section.description,
            order_index=section.order_index,
            total_lessons=total_lessons,
            created_at=section.created_at,
            updated_at=section.updated_at,
        )

    def create_section(self, actor: User, course_id: UUID, data: SectionCreate) -> SectionResponse:
        course = get_course_or_404(self.db, course_id)
        ensure_can_manage(actor, course)

        section = Section(
            course_id=course.id,
            title=data.title,
            description=data.description,
            order_index=self.sections.count_by_course(course.id) + 1,
        )
        self.sections.add(section)
        self.db.commit()
        self.db.refresh(section)

        logger.info(
            "section_created",
            section_id=str(section.id),
            course_id=str(course.id),
            order_index=section.order_index,
        )
        return self._to_response(section, total_lessons=0)

    def list_sections(self, course_id: UUID, viewer: User | None = None) -> list[SectionResponse]:
        course = get_course_or_404(self.db, course_id)
        ensure_visible(viewer, course)

        sections = self.sections.list_by_course(course.id)
        counts = self.lessons.count_by_sections([s.id for s in sections])
        return [self._to_response(s, total_lessons=counts.get(s.id, 0)) for s in sections]

    def get_section(
        self, section_id: UUID, viewer: User | None = None
    ) -> SectionWithLessonsResponse:
        section = self._get_or_404(section_id)
        ensure_visible(viewer, section.course)

        lessons = [
            LessonSummary.model_validate(lesson)
            for lesson in self.lessons.list_by_section(section.id)
        ]
        return SectionWithLessonsResponse(
            **self._to_response(section, total_lessons=len(lessons)).model_dump(),
            lessons=lessons,
        )

    def update_section(
        self, actor: User, section_id: UUID, data: SectionUpdate
    ) -> SectionResponse:
        section = self._get_or_404(section_id)
        ensure_can_manage(actor, section.course)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(section, field, value)
        self.db.commit()
        self.db.refresh(section)
        return self._to_response(section)

    def delete_section(self, actor: User, section_id: UUID) -> None:
        """Delete a section, its lessons and their progress, then close the index gap."""
        section = self._get_or_404(section_id)
        ensure_can_manage(actor, section.course)

        course_id, order_index = section.course_id, section.order_index
        lesson_ids = self.lessons.ids_by_section(section.id)
        ProgressRepository(self.db).delete_by_lessons(lesson_ids)
        self.lessons.delete_by_ids(lesson_ids)
        self.sections.delete(section)
        self.sections.shift_down_after(course_id, order_index)
        self.db.commit()

        logger.info(
            "section_deleted",
            section_id=str(section_id),
            course_id=str(course_id),
            lessons_removed=len(lesson_ids),
        )

    def reorder_sections(
        self, actor: User, course_id: UUID, ordered_ids: list[UUID]
    ) -> list[SectionResponse]:
        course = get_course_or_404(self.db, course_id)
        ensure_can_manage(actor, course)

        ordered = apply_order(
            self.sections.list_by_course(course.id),
            ordered_ids,
            lookup=self.sections.get_by_id,
            belongs=lambda s: s.course_id == course.id,
            not_found=SectionNotFoundError,
            label="section",
        )
        self.db.commit()

        logger.info("sections_reordered", course_id=str(course.id), count=len(ordered))
        counts = self.lessons.count_by_sections([s.id for s in ordered])
        return [self._to_response(s, total_lessons=counts.get(s.id, 0)) for s in ordered]
