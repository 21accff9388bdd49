from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import RequirePermission
from app.auth.models.user import User
from app.auth.permissions import Action
from app.courses.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.courses.services.category_service import CategoryService
from app.db.session import get_db

router = APIRouter()

require_category_admin = RequirePermission(Action.MANAGE_CATEGORIES)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(db: Session = Depends(get_db)) -> list[CategoryResponse]:
    return CategoryService(db).list_categories()


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_category_admin),
) -> CategoryResponse:
    return CategoryService(db).create_category(data)


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: UUID, db: Session = Depends(get_db)) -> CategoryResponse:
    return CategoryService(db).get_category(category_id)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_category_admin),
) -> CategoryResponse:
    return CategoryService(db).update_category(category_id, data)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_category_admin),
) -> None:
    CategoryService(db).delete_category(category_id)
