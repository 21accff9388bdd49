import enum
import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base


class CourseStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class LessonType(str, enum.Enum):
    VIDEO = "VIDEO"
    PDF = "PDF"
    QUIZ = "QUIZ"
    TEXT = "TEXT"


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    thumbnail_url: Mapped[str | None] = mapped_column(String(500), default=None)
    status: Mapped[CourseStatus] = mapped_column(
        Enum(CourseStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=CourseStatus.DRAFT,
        index=True,
    )
    instructor_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("categories.id"), default=None, index=True
    )
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    instructor = relationship("User")
    category = relationship("Category")

    @property
    def is_free(self) -> bool:
        return self.price is None or Decimal(self.price) == 0

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title={self.title}, status={self.status})>"


class Section(Base):
    __tablename__ = "sections"
    __table_args__ = (Index("ix_sections_course_order", "course_id", "order_index"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("courses.id"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    order_index: Mapped[int] = mapped_column(default=1)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    course = relationship("Course")

    def __repr__(self) -> str:
        return f"<Section(id={self.id}, title={self.title}, course_id={self.course_id})>"


class Lesson(Base):
    __tablename__ = "lessons"
    __table_args__ = (Index("ix_lessons_section_order", "section_id", "order_index"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    section_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("sections.id"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    type: Mapped[LessonType] = mapped_column(
        Enum(LessonType, values_callable=lambda obj: [e.value for e in obj]),
        default=LessonType.TEXT,
    )
    content: Mapped[str | None] = mapped_column(Text, default=None)
    duration_minutes: Mapped[int] = mapped_column(default=0)
    order_index: Mapped[int] = mapped_column(default=1)
    is_free: Mapped[bool] = mapped_column(default=False)
    video_url: Mapped[str | None] = mapped_column(String(500), default=None)
    file_url: Mapped[str | None] = mapped_column(String(500), default=None)
    quiz_data: Mapped[str | None] = mapped_column(Text, default=None)
    thumbnail_url: Mapped[str | None] = mapped_column(String(500), default=None)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    section = relationship("Section")

    def __repr__(self) -> str:
        return f"<Lesson(id={self.id}, title={self.title}, section_id={self.section_id})>"
