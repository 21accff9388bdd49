from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.courses.schemas.certificate import CertificateResponse, CertificateVerifyResponse
from app.courses.services.certificate_service import CertificateService
from app.db.session import get_db

router = APIRouter()


@router.get("/certificates/me", response_model=list[CertificateResponse])
async def get_my_certificates(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CertificateResponse]:
    return CertificateService(db).get_my_certificates(current_user)


@router.get("/certificates/courses/{course_id}", response_model=CertificateResponse)
async def get_certificate(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CertificateResponse:
    return CertificateService(db).get_certificate(course_id, current_user)


@router.get("/certificates/courses/{course_id}/download")
async def download_certificate(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    """
    Download the certificate for a completed course as a PDF.

    The PDF is rendered on demand from the stored certificate.
    """
    number, pdf = CertificateService(db).generate_certificate_pdf(course_id, current_user)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="certificate-{number}.pdf"'},
    )


@router.get("/certificates/verify/{certificate_number}", response_model=CertificateVerifyResponse)
async def verify_certificate(
    certificate_number: str,
    db: Session = Depends(get_db),
) -> CertificateVerifyResponse:
    """Public certificate verification. No authentication required."""
    return CertificateService(db).verify_certificate(certificate_number)
