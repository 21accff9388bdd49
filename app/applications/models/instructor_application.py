import uuid
from datetime import UTC, datetime

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.applications.models.approval import ApprovalStatus
from app.db.session import Base


class InstructorApplication(Base):
    __tablename__ = "instructor_applications"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True)
    motivation: Mapped[str] = mapped_column(String(500))
    expertise: Mapped[str | None] = mapped_column(Text, default=None)
    linkedin_url: Mapped[str | None] = mapped_column(String(500), default=None)
    portfolio_url: Mapped[str | None] = mapped_column(String(500), default=None)
    status: Mapped[ApprovalStatus] = mapped_column(
        Enum(
            ApprovalStatus,
            name="approval_status",
            values_callable=lambda obj: [e.value for e in obj],
        ),
        default=ApprovalStatus.PENDING,
        index=True,
    )
    admin_comment: Mapped[str | None] = mapped_column(Text, default=None)
    reviewed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), default=None
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    user = relationship("User", foreign_keys=[user_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])

    def __repr__(self) -> str:
        return f"<InstructorApplication(id={self.id}, user_id={self.user_id}, status={self.status})>"  # noqa: E501
