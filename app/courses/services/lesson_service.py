from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.core.config import settings
from app.core.constants import LESSON_MEDIA_ALLOWED_MIME_TYPES
from app.core.exceptions import (
    LessonNotFoundError,
    NotEnrolledError,
    SectionNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.core.storage import StorageBackend, generate_unique_filename, validate_upload
from app.courses.models import Course, CourseStatus, Lesson, Section
from app.courses.repositories.course_repository import LessonRepository, SectionRepository
from app.courses.repositories.enrollment_repository import EnrollmentRepository
from app.courses.repositories.progress_repository import ProgressRepository
from app.courses.schemas.course import LessonCreate, LessonResponse, LessonSummary, LessonUpdate
from app.courses.services.course_service import (
    can_view_unpublished,
    ensure_can_manage,
    ensure_visible,
)
from app.courses.services.ordering import apply_order

logger = structlog.get_logger(__name__)


class LessonService:
    def __init__(self, db: Session):
        self.db = db
        self.lessons = LessonRepository(db)
        self.sections = SectionRepository(db)

    def _get_section_or_404(self, section_id: UUID) -> Section:
        section = self.sections.get_by_id(section_id)
        if section is None:
            raise SectionNotFoundError(section_id)
        return section

    def _get_or_404(self, lesson_id: UUID) -> Lesson:
        lesson = self.lessons.get_by_id(lesson_id)
        if lesson is None:
            raise LessonNotFoundError(lesson_id)
        return lesson

    def _course_of(self, lesson: Lesson) -> Course:
        return lesson.section.course

    def can_read_content(self, viewer: User | None, lesson: Lesson) -> bool:
        """Free lessons are open; anything else needs enrollment, ownership or admin."""
        if lesson.is_free:
            return True
        if viewer is None:
            return False
        course = self._course_of(lesson)
        if can_view_unpublished(viewer, course):
            return True
        return EnrollmentRepository(self.db).exists_by_user_and_course(viewer.id, course.id)

    def create_lesson(self, actor: User, section_id: UUID, data: LessonCreate) -> LessonResponse:
        section = self._get_section_or_404(section_id)
        ensure_can_manage(actor, section.course)

        lesson = Lesson(
            section_id=section.id,
            order_index=self.lessons.count_by_section(section.id) + 1,
            **data.model_dump(),
        )
        self.lessons.add(lesson)
        self.db.commit()
        self.db.refresh(lesson)

        logger.info(
            "lesson_created",
            lesson_id=str(lesson.id),
            section_id=str(section.id),
            order_index=lesson.order_index,
        )
        return LessonResponse.model_validate(lesson)

    def list_lessons(self, section_id: UUID, viewer: User | None = None) -> list[LessonSummary]:
        section = self._get_section_or_404(section_id)
        ensure_visible(viewer, section.course)
        return [
            LessonSummary.model_validate(lesson)
            for lesson in self.lessons.list_by_section(section.id)
        ]

    def get_lesson(self, lesson_id: UUID, viewer: User | None = None) -> LessonResponse:
        lesson = self._get_or_404(lesson_id)
        course = self._course_of(lesson)
        if course.status is CourseStatus.DRAFT and not can_view_unpublished(viewer, course):
            raise LessonNotFoundError(lesson_id)

        if not self.can_read_content(viewer, lesson):
            if viewer is None:
                raise UnauthorizedError("Sign in to access this lesson")
            raise NotEnrolledError("You must be enrolled in this course to access this lesson")
        return LessonResponse.model_validate(lesson)

    def update_lesson(self, actor: User, lesson_id: UUID, data: LessonUpdate) -> LessonResponse:
        lesson = self._get_or_404(lesson_id)
        ensure_can_manage(actor, self._course_of(lesson))

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(lesson, field, value)
        self.db.commit()
        self.db.refresh(lesson)
        return LessonResponse.model_validate(lesson)

    def delete_lesson(self, actor: User, lesson_id: UUID) -> None:
        lesson = self._get_or_404(lesson_id)
        ensure_can_manage(actor, self._course_of(lesson))

        section_id, order_index = lesson.section_id, lesson.order_index
        ProgressRepository(self.db).delete_by_lessons([lesson.id])
        self.lessons.delete(lesson)
        self.lessons.shift_down_after(section_id, order_index)
        self.db.commit()

        logger.info("lesson_deleted", lesson_id=str(lesson_id), section_id=str(section_id))

    def reorder_lessons(
        self, actor: User, section_id: UUID, ordered_ids: list[UUID]
    ) -> list[LessonSummary]:
        section = self._get_section_or_404(section_id)
        ensure_can_manage(actor, section.course)

        ordered = apply_order(
            self.lessons.list_by_section(section.id),
            ordered_ids,
            lookup=self.lessons.get_by_id,
            belongs=lambda lesson: lesson.section_id == section.id,
            not_found=LessonNotFoundError,
            label="lesson",
        )
        self.db.commit()

        logger.info("lessons_reordered", section_id=str(section.id), count=len(ordered))
        return [LessonSummary.model_validate(lesson) for lesson in ordered]

    def upload_media(
        self,
        actor: User,
        lesson_id: UUID,
        *,
        file_content: bytes,
        filename: str,
        content_type: str | None,
        storage: StorageBackend,
    ) -> LessonResponse:
        """Store a lesson video or PDF and record its URL on the lesson."""
        lesson = self._get_or_404(lesson_id)
        ensure_can_manage(actor, self._course_of(lesson))

        target_field = next(
            (
                field
                for field, mime_types in LESSON_MEDIA_ALLOWED_MIME_TYPES.items()
                if content_type in mime_types
            ),
            None,
        )
        if target_field is None:
            allowed = [t for types in LESSON_MEDIA_ALLOWED_MIME_TYPES.values() for t in types]
            raise ValidationError(
                f"Invalid file type {content_type}. Allowed: {', '.join(allowed)}", field="file"
            )
        validate_upload(
            file_content,
            content_type,
            LESSON_MEDIA_ALLOWED_MIME_TYPES[target_field],
            settings.max_file_size_bytes,
        )

        path = storage.upload(
            file_content, f"lessons/{lesson.id}", generate_unique_filename(filename)
        )
        setattr(lesson, target_field, storage.download_url(path))
        self.db.commit()
        self.db.refresh(lesson)

        logger.info("lesson_media_uploaded", lesson_id=str(lesson.id), field=target_field)
        return LessonResponse.model_validate(lesson)
