from uuid import UUID

from sqlalchemy.orm import Session

from app.core.repository import BaseRepository
from app.courses.models import Category, Course


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, db: Session):
        super().__init__(db, Category)

    def get_by_name(self, name: str) -> Category | None:
        return self.query().filter(Category.name == name).first()

    def list_ordered(self) -> list[Category]:
        return self.query().order_by(Category.name).all()

    def is_referenced(self, category_id: UUID) -> bool:
        return (
            self.db.query(Course.id).filter(Course.category_id == category_id).first() is not None
        )
