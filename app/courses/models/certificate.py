import uuid
from datetime import UTC, datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base


class Certificate(Base):
    __tablename__ = "certificates"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_user_course_certificate"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    certificate_number: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("courses.id"), index=True)
    issued_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    completion_date: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    user = relationship("User")
    course = relationship("Course")

    def __repr__(self) -> str:
        return f"<Certificate(id={self.id}, number={self.certificate_number}, user_id={self.user_id}, course_id={self.course_id})>"  # noqa: E501
