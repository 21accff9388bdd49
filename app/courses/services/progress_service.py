from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.auth.permissions import is_admin
from app.core.exceptions import (
    ConflictError,
    EnrollmentNotFoundError,
    ForbiddenError,
    LessonNotFoundError,
    ProgressNotFoundError,
    ValidationError,
)
from app.courses.models import Certificate, Enrollment, LessonProgress
from app.courses.repositories.course_repository import LessonRepository
from app.courses.repositories.enrollment_repository import EnrollmentRepository
from app.courses.repositories.progress_repository import ProgressRepository
from app.courses.schemas.progress import (
    EnrollmentProgressSummary,
    LessonProgressResponse,
    LessonProgressWithLesson,
    ProgressUpdateResponse,
    WatchProgressUpdate,
)
from app.courses.services.certificate_service import CertificateService

logger = structlog.get_logger(__name__)


def progress_percentage(completed: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(completed / total * 100, 2)


class ProgressService:
    def __init__(self, db: Session):
        self.db = db
        self.progress = ProgressRepository(db)
        self.lessons = LessonRepository(db)
        self.enrollments = EnrollmentRepository(db)

    def get_enrollment(self, enrollment_id: UUID, actor: User | None = None) -> Enrollment:
        """Load an enrollment; when ``actor`` is given it must own it or be an admin."""
        enrollment = self.enrollments.get_by_id(enrollment_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(f"Enrollment {enrollment_id} not found")
        if actor is not None and enrollment.user_id != actor.id and not is_admin(actor):
            raise ForbiddenError("You can only access your own enrollments")
        return enrollment

    def calculate_progress(self, enrollment: Enrollment) -> tuple[int, int, float]:
        """Return (completed lessons, total lessons, percentage) for an enrollment."""
        total = self.lessons.count_by_course(enrollment.course_id)
        completed = self.progress.count_completed(enrollment.id)
        return completed, total, progress_percentage(completed, total)

    def get_progress(
        self, enrollment_id: UUID, lesson_id: UUID, actor: User | None = None
    ) -> LessonProgressResponse:
        enrollment = self.get_enrollment(enrollment_id, actor)
        row = self.progress.get_by_enrollment_and_lesson(enrollment.id, lesson_id)
        if row is None:
            raise ProgressNotFoundError(enrollment_id, lesson_id)
        return LessonProgressResponse.model_validate(row)

    def get_progress_by_enrollment(
        self, enrollment_id: UUID, actor: User | None = None
    ) -> EnrollmentProgressSummary:
        enrollment = self.get_enrollment(enrollment_id, actor)
        completed, total, percentage = self.calculate_progress(enrollment)
        rows = self.progress.list_by_enrollment(enrollment.id)
        return EnrollmentProgressSummary(
            enrollment_id=enrollment.id,
            course_id=enrollment.course_id,
            total_lessons=total,
            completed_lessons=completed,
            progress_percentage=percentage,
            completed_at=enrollment.completed_at,
            lessons=[
                LessonProgressWithLesson(
                    **LessonProgressResponse.model_validate(row).model_dump(),
                    lesson_title=row.lesson.title,
                    section_id=row.lesson.section_id,
                )
                for row in rows
            ],
        )

    def _get_or_create_row(self, enrollment: Enrollment, lesson_id: UUID) -> LessonProgress:
        lesson = self.lessons.get_by_id(lesson_id)
        if lesson is None:
            raise LessonNotFoundError(lesson_id)
        if lesson.section.course_id != enrollment.course_id:
            raise ValidationError(
                "Lesson does not belong to the enrolled course", field="lesson_id"
            )

        row = self.progress.get_by_enrollment_and_lesson(enrollment.id, lesson_id)
        if row is not None:
            return row

        row = LessonProgress(enrollment_id=enrollment.id, lesson_id=lesson_id, completed=False)
        try:
            with self.db.begin_nested():
                self.db.add(row)
                self.db.flush()
        except IntegrityError as e:
            winner = self.progress.get_by_enrollment_and_lesson(enrollment.id, lesson_id)
            if winner is None:
                raise ConflictError("Could not record lesson progress", resource="progress") from e
            return winner
        return row

    def _set_completed(
        self, enrollment_id: UUID, lesson_id: UUID, completed: bool, actor: User | None
    ) -> ProgressUpdateResponse:
        enrollment = self.get_enrollment(enrollment_id, actor)
        row = self._get_or_create_row(enrollment, lesson_id)

        row.completed = completed
        row.completed_at = datetime.now(UTC) if completed else None
        self.db.flush()

        _, _, percentage = self.calculate_progress(enrollment)
        certificate = self._record_completion(enrollment, percentage)
        self.db.commit()
        self.db.refresh(row)

        logger.info(
            "lesson_progress_updated",
            enrollment_id=str(enrollment.id),
            lesson_id=str(lesson_id),
            completed=completed,
            progress_percentage=percentage,
        )
        return ProgressUpdateResponse(
            progress=LessonProgressResponse.model_validate(row),
            progress_percentage=percentage,
            course_completed=enrollment.completed_at is not None,
            certificate_number=certificate.certificate_number if certificate else None,
        )

    def _record_completion(self, enrollment: Enrollment, percentage: float) -> Certificate | None:
        """At 100%: stamp completed_at once and make sure a certificate exists."""
        if percentage < 100:
            return None

        if enrollment.completed_at is None:
            enrollment.completed_at = datetime.now(UTC)
            logger.info(
                "enrollment_completed",
                enrollment_id=str(enrollment.id),
                course_id=str(enrollment.course_id),
            )
        return CertificateService(self.db).issue_certificate(
            enrollment.user_id, enrollment.course_id, completion_date=enrollment.completed_at
        )

    def mark_lesson_completed(
        self, enrollment_id: UUID, lesson_id: UUID, actor: User | None = None
    ) -> ProgressUpdateResponse:
        return self._set_completed(enrollment_id, lesson_id, True, actor)

    def mark_lesson_incomplete(
        self, enrollment_id: UUID, lesson_id: UUID, actor: User | None = None
    ) -> ProgressUpdateResponse:
        """Clear a lesson. The enrollment's completed_at and any certificate are kept."""
        return self._set_completed(enrollment_id, lesson_id, False, actor)

    def update_watch_progress(
        self,
        enrollment_id: UUID,
        lesson_id: UUID,
        data: WatchProgressUpdate,
        actor: User | None = None,
    ) -> LessonProgressResponse:
        """Record playback time and resume position. Completion is left as it is."""
        enrollment = self.get_enrollment(enrollment_id, actor)
        row = self._get_or_create_row(enrollment, lesson_id)

        row.watched_seconds = data.watched_seconds
        row.last_position_seconds = data.last_position_seconds
        self.db.commit()
        self.db.refresh(row)

        logger.info(
            "lesson_watch_progress_updated",
            enrollment_id=str(enrollment.id),
            lesson_id=str(lesson_id),
            last_position_seconds=data.last_position_seconds,
        )
        return LessonProgressResponse.model_validate(row)
