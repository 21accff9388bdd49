from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.auth.models.user import User, UserRole
from app.auth.permissions import Action, authorize, is_admin
from app.auth.repositories.user_repository import UserRepository
from app.core.constants import THUMBNAIL_ALLOWED_MIME_TYPES, THUMBNAIL_MAX_SIZE_BYTES
from app.core.exceptions import (
    CourseNotFoundError,
    ForbiddenError,
    NotFoundError,
    StateError,
    ValidationError,
)
from app.core.schemas import PaginatedResponse, paginated_response
from app.core.storage import StorageBackend, generate_unique_filename, validate_upload
from app.courses.models import Course, CourseStatus
from app.courses.repositories.category_repository import CategoryRepository
from app.courses.repositories.certificate_repository import CertificateRepository
from app.courses.repositories.course_repository import (
    CourseRepository,
    LessonRepository,
    SectionRepository,
)
from app.courses.repositories.enrollment_repository import EnrollmentRepository
from app.courses.repositories.progress_repository import ProgressRepository
from app.courses.repositories.review_repository import ReviewRepository
from app.courses.schemas.course import (
    CourseCreate,
    CourseDetailResponse,
    CourseResponse,
    CourseUpdate,
    LessonSummary,
    SectionWithLessonsResponse,
)

logger = structlog.get_logger(__name__)


def get_course_or_404(db: Session, course_id: UUID) -> Course:
    course = CourseRepository(db).get_by_id(course_id)
    if course is None:
        raise CourseNotFoundError(course_id)
    return course


def ensure_can_manage(actor: User, course: Course) -> None:
    """Only the owning instructor or an admin may change a course or its content."""
    if not authorize(actor, Action.MANAGE_COURSE, course):
        raise ForbiddenError("Only the course instructor or an admin can modify this course")


def can_view_unpublished(viewer: User | None, course: Course) -> bool:
    return viewer is not None and (is_admin(viewer) or course.instructor_id == viewer.id)


def ensure_visible(viewer: User | None, course: Course) -> None:
    """Draft courses are hidden from everyone but their instructor and admins."""
    if course.status is CourseStatus.DRAFT and not can_view_unpublished(viewer, course):
        raise CourseNotFoundError(course.id)


class CourseService:
    def __init__(self, db: Session):
        self.db = db
        self.courses = CourseRepository(db)
        self.sections = SectionRepository(db)
        self.lessons = LessonRepository(db)
        self.reviews = ReviewRepository(db)

    def _to_response(self, course: Course) -> CourseResponse:
        average, _ = self.reviews.rating_stats(course.id)
        return CourseResponse(
            id=course.id,
            title=course.title,
            description=course.description,
            price=float(course.price),
            is_free=course.is_free,
            thumbnail_url=course.thumbnail_url,
            status=course.status,
            instructor_id=course.instructor_id,
            instructor_name=course.instructor.full_name if course.instructor else "",
            category_id=course.category_id,
            category_name=course.category.name if course.category else None,
            total_sections=self.sections.count_by_course(course.id),
            total_lessons=self.lessons.count_by_course(course.id),
            average_rating=round(average, 1) if average is not None else None,
            created_at=course.created_at,
            updated_at=course.updated_at,
        )

    def _check_category(self, category_id: UUID | None) -> None:
        if category_id is not None and CategoryRepository(self.db).get_by_id(category_id) is None:
            raise NotFoundError(f"Category {category_id} not found", resource="category")

    def _resolve_instructor(self, actor: User, instructor_id: UUID | None) -> UUID:
        if instructor_id is None or instructor_id == actor.id:
            return actor.id
        if not is_admin(actor):
            raise ForbiddenError("Only admins can create courses for another instructor")
        instructor = UserRepository(self.db).get_active_by_id(instructor_id)
        if instructor is None or instructor.role is not UserRole.INSTRUCTOR:
            raise ValidationError(
                "instructor_id must reference an instructor", field="instructor_id"
            )
        return instructor.id

    def create_course(self, actor: User, data: CourseCreate) -> CourseResponse:
        self._check_category(data.category_id)
        course = Course(
            title=data.title,
            description=data.description,
            price=data.price,
            thumbnail_url=data.thumbnail_url,
            category_id=data.category_id,
            instructor_id=self._resolve_instructor(actor, data.instructor_id),
        )
        self.courses.add(course)
        self.db.commit()
        self.db.refresh(course)

        logger.info(
            "course_created",
            course_id=str(course.id),
            instructor_id=str(course.instructor_id),
            actor_id=str(actor.id),
        )
        return self._to_response(course)

    def get_course(self, course_id: UUID, viewer: User | None = None) -> CourseDetailResponse:
        """Course with its full outline. Lesson bodies are not included."""
        course = get_course_or_404(self.db, course_id)
        ensure_visible(viewer, course)

        sections = self.sections.list_by_course(course.id)
        lessons_by_section: dict[UUID, list[LessonSummary]] = {s.id: [] for s in sections}
        for lesson in self.lessons.list_by_course(course.id):
            lessons_by_section[lesson.section_id].append(LessonSummary.model_validate(lesson))

        outline = [
            SectionWithLessonsResponse(
                id=section.id,
                course_id=section.course_id,
                title=section.title,
                description=section.description,
                order_index=section.order_index,
                total_lessons=len(lessons_by_section[section.id]),
                created_at=section.created_at,
                updated_at=section.updated_at,
                lessons=lessons_by_section[section.id],
            )
            for section in sections
        ]
        return CourseDetailResponse(**self._to_response(course).model_dump(), sections=outline)

    def list_published(
        self,
        *,
        category_id: UUID | None = None,
        instructor_id: UUID | None = None,
        title: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[CourseResponse]:
        courses, total = self.courses.search(
            status=CourseStatus.PUBLISHED,
            category_id=category_id,
            instructor_id=instructor_id,
            title=title,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return paginated_response(
            [self._to_response(c) for c in courses], total=total, page=page, limit=limit
        )

    def list_mine(self, actor: User) -> list[CourseResponse]:
        return [self._to_response(c) for c in self.courses.list_by_instructor(actor.id)]

    def update_course(self, actor: User, course_id: UUID, data: CourseUpdate) -> CourseResponse:
        course = get_course_or_404(self.db, course_id)
        ensure_can_manage(actor, course)

        updates = data.model_dump(exclude_unset=True)
        if "category_id" in updates:
            self._check_category(updates["category_id"])
        for field, value in updates.items():
            setattr(course, field, value)

        self.db.commit()
        self.db.refresh(course)
        logger.info("course_updated", course_id=str(course.id), fields=sorted(updates))
        return self._to_response(course)

    def delete_course(self, actor: User, course_id: UUID) -> None:
        """Delete a course together with everything that hangs off it.

        Certificates, reviews, enrollments with their progress, and sections
        with their lessons are removed in the same transaction.
        """
        course = get_course_or_404(self.db, course_id)
        ensure_can_manage(actor, course)

        enrollments = EnrollmentRepository(self.db)
        progress = ProgressRepository(self.db)

        lesson_ids = self.lessons.ids_by_course(course.id)
        progress.delete_by_enrollments(enrollments.ids_by_course(course.id))
        progress.delete_by_lessons(lesson_ids)
        CertificateRepository(self.db).delete_by_course(course.id)
        self.reviews.delete_by_course(course.id)
        enrollments.delete_by_course(course.id)
        self.lessons.delete_by_ids(lesson_ids)
        self.sections.delete_by_course(course.id)
        self.courses.delete(course)
        self.db.commit()

        logger.info("course_deleted", course_id=str(course_id), actor_id=str(actor.id))

    def publish_course(self, actor: User, course_id: UUID) -> CourseResponse:
        course = get_course_or_404(self.db, course_id)
        ensure_can_manage(actor, course)

        if course.status is CourseStatus.PUBLISHED:
            raise StateError("Course is already published", state=course.status.value)
        if self.lessons.count_by_course(course.id) == 0:
            raise ValidationError("A course needs at least one lesson before it can be published")

        course.status = CourseStatus.PUBLISHED
        self.db.commit()
        self.db.refresh(course)
        logger.info("course_published", course_id=str(course.id))
        return self._to_response(course)

    def archive_course(self, actor: User, course_id: UUID) -> CourseResponse:
        course = get_course_or_404(self.db, course_id)
        ensure_can_manage(actor, course)

        if course.status is not CourseStatus.PUBLISHED:
            raise StateError("Only published courses can be archived", state=course.status.value)

        course.status = CourseStatus.ARCHIVED
        self.db.commit()
        self.db.refresh(course)
        logger.info("course_archived", course_id=str(course.id))
        return self._to_response(course)

    def upload_thumbnail(
        self,
        actor: User,
        course_id: UUID,
        *,
        file_content: bytes,
        filename: str,
        content_type: str | None,
        storage: StorageBackend,
    ) -> CourseResponse:
        course = get_course_or_404(self.db, course_id)
        ensure_can_manage(actor, course)
        validate_upload(
            file_content, content_type, THUMBNAIL_ALLOWED_MIME_TYPES, THUMBNAIL_MAX_SIZE_BYTES
        )

        path = storage.upload(
            file_content, f"courses/{course.id}/thumbnails", generate_unique_filename(filename)
        )
        course.thumbnail_url = storage.download_url(path)
        self.db.commit()
        self.db.refresh(course)

        logger.info("course_thumbnail_uploaded", course_id=str(course.id), path=path)
        return self._to_response(course)
