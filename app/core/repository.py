"""Base repository shared by the domain repositories.

Repositories stage and flush changes but never commit: the service
that owns the unit of work decides when to commit.
"""

from typing import Any, Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy.orm import Query, Session

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """Lookup by primary key plus add/delete for one mapped model.

    Example:
        ```python
        class CategoryRepository(BaseRepository[Category]):
            def __init__(self, db: Session):
                super().__init__(db, Category)

            def get_by_name(self, name: str) -> Category | None:
                return self.query().filter(Category.name == name).first()
        ```
    """

    def __init__(self, db: Session, model: type[ModelType]):
        self.db = db
        self.model = model

    def query(self) -> Query[Any]:
        return self.db.query(self.model)

    def get_by_id(self, entity_id: UUID) -> ModelType | None:
        return cast(ModelType | None, self.db.get(self.model, entity_id))

    def add(self, instance: ModelType) -> ModelType:
        """Stage a new entity and flush it so generated values are populated."""
        self.db.add(instance)
        self.db.flush()
        return instance

    def delete(self, instance: ModelType) -> None:
        self.db.delete(instance)
        self.db.flush()
