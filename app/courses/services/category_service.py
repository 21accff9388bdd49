from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.courses.models import Category
from app.courses.repositories.category_repository import CategoryRepository
from app.courses.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate

logger = structlog.get_logger(__name__)


class CategoryService:
    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepository(db)

    def _get_or_404(self, category_id: UUID) -> Category:
        category = self.categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found", resource="category")
        return category

    def _ensure_name_free(self, name: str, exclude_id: UUID | None = None) -> None:
        existing = self.categories.get_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"Category '{name}' already exists", resource="category")

    def _commit(self, name: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Category '{name}' already exists", resource="category") from e

    def list_categories(self) -> list[CategoryResponse]:
        return [CategoryResponse.model_validate(c) for c in self.categories.list_ordered()]

    def get_category(self, category_id: UUID) -> CategoryResponse:
        return CategoryResponse.model_validate(self._get_or_404(category_id))

    def create_category(self, data: CategoryCreate) -> CategoryResponse:
        self._ensure_name_free(data.name)
        category = Category(name=data.name, description=data.description)
        self.db.add(category)
        self._commit(data.name)
        self.db.refresh(category)
        logger.info("category_created", category_id=str(category.id), name=category.name)
        return CategoryResponse.model_validate(category)

    def update_category(self, category_id: UUID, data: CategoryUpdate) -> CategoryResponse:
        category = self._get_or_404(category_id)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name"):
            self._ensure_name_free(updates["name"], exclude_id=category.id)
        for field, value in updates.items():
            setattr(category, field, value)
        self._commit(category.name)
        self.db.refresh(category)
        return CategoryResponse.model_validate(category)

    def delete_category(self, category_id: UUID) -> None:
        category = self._get_or_404(category_id)
        if self.categories.is_referenced(category_id):
            raise ConflictError(
                "Category is still assigned to one or more courses", resource="category"
            )
        self.categories.delete(category)
        self.db.commit()
        logger.info("category_deleted", category_id=str(category_id))
