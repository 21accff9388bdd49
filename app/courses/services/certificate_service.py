import io
import re
import secrets
from datetime import UTC, datetime
from uuid import UUID

import structlog
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.core.config import settings
from app.core.constants import CERTIFICATE_NUMBER_PATTERN
from app.core.exceptions import CertificateNotFoundError, ConflictError
from app.courses.models import Certificate
from app.courses.repositories.certificate_repository import CertificateRepository
from app.courses.schemas.certificate import CertificateResponse, CertificateVerifyResponse

logger = structlog.get_logger(__name__)

_NUMBER_RE = re.compile(CERTIFICATE_NUMBER_PATTERN)


def generate_certificate_number(now: datetime | None = None) -> str:
    """
    Generate a certificate number in format: <PREFIX>-YYYYMMDD-NNNNN

    Example: SC-20260121-04217
    """
    date_part = (now or datetime.now(UTC)).strftime("%Y%m%d")
    return f"{settings.CERTIFICATE_PREFIX}-{date_part}-{secrets.randbelow(100_000):05d}"


def render_certificate_pdf(
    *,
    certificate_number: str,
    student_name: str,
    course_title: str,
    instructor_name: str,
    completion_date: datetime,
    issued_at: datetime,
) -> bytes:
    """Render a one-page landscape certificate."""
    buffer = io.BytesIO()

    page_width, page_height = landscape(A4)
    c = canvas.Canvas(buffer, pagesize=landscape(A4))
    c.setTitle(f"Certificate {certificate_number}")

    def centered(text: str, font: str, size: int, y: float) -> float:
        c.setFont(font, size)
        width = c.stringWidth(text, font, size)
        c.drawString((page_width - width) / 2, y, text)
        return width

    c.setFillColorRGB(1, 1, 1)
    c.rect(0, 0, page_width, page_height, fill=1, stroke=0)

    c.setStrokeColorRGB(0.12, 0.31, 0.6)
    c.setLineWidth(3)
    c.rect(1 * cm, 1 * cm, page_width - 2 * cm, page_height - 2 * cm, fill=0, stroke=1)

    c.setStrokeColorRGB(0.85, 0.65, 0.13)
    c.setLineWidth(1)
    c.rect(1.5 * cm, 1.5 * cm, page_width - 3 * cm, page_height - 3 * cm, fill=0, stroke=1)

    c.setFillColorRGB(0.12, 0.31, 0.6)
    centered(settings.PLATFORM_NAME.upper(), "Helvetica-Bold", 14, page_height - 2.5 * cm)
    centered("CERTIFICATE OF COMPLETION", "Helvetica-Bold", 34, page_height - 4.5 * cm)

    c.setStrokeColorRGB(0.85, 0.65, 0.13)
    c.setLineWidth(2)
    c.line(8 * cm, page_height - 5.3 * cm, page_width - 8 * cm, page_height - 5.3 * cm)

    c.setFillColorRGB(0.3, 0.3, 0.3)
    centered("This certifies that", "Helvetica", 18, page_height - 7 * cm)

    c.setFillColorRGB(0.1, 0.1, 0.1)
    name_width = centered(student_name, "Helvetica-Bold", 30, page_height - 9 * cm)
    name_x_start = (page_width - name_width) / 2
    c.setLineWidth(1)
    c.line(
        name_x_start, page_height - 9.5 * cm, name_x_start + name_width, page_height - 9.5 * cm
    )

    c.setFillColorRGB(0.3, 0.3, 0.3)
    centered("has successfully completed", "Helvetica", 18, page_height - 11 * cm)

    c.setFillColorRGB(0.12, 0.31, 0.6)
    centered(course_title, "Helvetica-Bold", 26, page_height - 12.8 * cm)

    c.setFillColorRGB(0.3, 0.3, 0.3)
    centered(f"Instructor: {instructor_name}", "Helvetica", 14, page_height - 14.2 * cm)
    centered(
        f"Completed on {completion_date.strftime('%B %d, %Y')}"
        f"  |  Issued on {issued_at.strftime('%B %d, %Y')}",
        "Helvetica",
        12,
        page_height - 15.5 * cm,
    )

    c.setFillColorRGB(0.5, 0.5, 0.5)
    centered(f"Certificate No: {certificate_number}", "Courier", 10, 2.2 * cm)
    centered(
        f"Verify at: {settings.FRONTEND_URL}/certificates/verify/{certificate_number}",
        "Helvetica",
        9,
        1.7 * cm,
    )

    c.showPage()
    c.save()

    pdf_bytes = buffer.getvalue()
    buffer.close()

    return pdf_bytes


class CertificateService:
    def __init__(self, db: Session):
        self.db = db
        self.certificates = CertificateRepository(db)

    def _to_response(self, certificate: Certificate) -> CertificateResponse:
        course = certificate.course
        return CertificateResponse(
            id=certificate.id,
            certificate_number=certificate.certificate_number,
            user_id=certificate.user_id,
            course_id=certificate.course_id,
            course_title=course.title,
            student_name=certificate.user.full_name,
            instructor_name=course.instructor.full_name,
            issued_at=certificate.issued_at,
            completion_date=certificate.completion_date,
        )

    def _get_or_404(self, course_id: UUID, user: User) -> Certificate:
        certificate = self.certificates.get_by_user_and_course(user.id, course_id)
        if certificate is None:
            raise CertificateNotFoundError(f"No certificate for course {course_id}")
        return certificate

    def issue_certificate(
        self, user_id: UUID, course_id: UUID, completion_date: datetime | None = None
    ) -> Certificate:
        """Return the (user, course) certificate, minting it if it does not exist yet.

        Each insert runs in a SAVEPOINT so a lost race leaves the caller's
        transaction usable. A clash on (user, course) means another request
        already minted it; a clash on the number is retried with a fresh one.
        Does not commit.
        """
        existing = self.certificates.get_by_user_and_course(user_id, course_id)
        if existing is not None:
            return existing

        for attempt in range(1, settings.CERTIFICATE_NUMBER_MAX_ATTEMPTS + 1):
            number = generate_certificate_number()
            if self.certificates.get_by_number(number) is not None:
                logger.warning("certificate_number_collision", number=number, attempt=attempt)
                continue

            certificate = Certificate(
                certificate_number=number,
                user_id=user_id,
                course_id=course_id,
                completion_date=completion_date or datetime.now(UTC),
            )
            try:
                with self.db.begin_nested():
                    self.db.add(certificate)
                    self.db.flush()
            except IntegrityError:
                winner = self.certificates.get_by_user_and_course(user_id, course_id)
                if winner is not None:
                    return winner
                logger.warning("certificate_number_collision", number=number, attempt=attempt)
                continue

            logger.info(
                "certificate_issued",
                certificate_number=number,
                user_id=str(user_id),
                course_id=str(course_id),
            )
            return certificate

        raise ConflictError(
            "Could not allocate a unique certificate number", resource="certificate"
        )

    def get_certificate(self, course_id: UUID, user: User) -> CertificateResponse:
        return self._to_response(self._get_or_404(course_id, user))

    def get_my_certificates(self, user: User) -> list[CertificateResponse]:
        return [self._to_response(c) for c in self.certificates.list_by_user(user.id)]

    def verify_certificate(self, certificate_number: str) -> CertificateVerifyResponse:
        """Public lookup. Malformed and unknown numbers give the same answer."""
        certificate = None
        if _NUMBER_RE.fullmatch(certificate_number):
            certificate = self.certificates.get_by_number(certificate_number)
        if certificate is None:
            raise CertificateNotFoundError()

        response = self._to_response(certificate)
        return CertificateVerifyResponse(
            valid=True,
            certificate_number=response.certificate_number,
            student_name=response.student_name,
            course_title=response.course_title,
            instructor_name=response.instructor_name,
            completion_date=certificate.completion_date,
            issued_at=certificate.issued_at,
        )

    def generate_certificate_pdf(self, course_id: UUID, user: User) -> tuple[str, bytes]:
        """Render the caller's certificate for a course. Returns (number, pdf bytes)."""
        certificate = self._get_or_404(course_id, user)
        course = certificate.course
        pdf = render_certificate_pdf(
            certificate_number=certificate.certificate_number,
            student_name=certificate.user.full_name,
            course_title=course.title,
            instructor_name=course.instructor.full_name,
            completion_date=certificate.completion_date,
            issued_at=certificate.issued_at,
        )
        logger.info("certificate_pdf_generated", certificate_number=certificate.certificate_number)
        return certificate.certificate_number, pdf
