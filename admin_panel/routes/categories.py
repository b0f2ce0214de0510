"""Категории каталога в админке."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from admin_panel.dependencies import get_current_admin, get_db_session
from schemas.catalog import CategoryPayload, CategoryUpdatePayload
from services import categories as categories_service

router = APIRouter(
    prefix="/api/admin/categories",
    tags=["AdminCategories"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("")
def list_categories(db: Session = Depends(get_db_session)):
    return categories_service.list_categories(db)


@router.get("/tree")
def category_tree(only_active: bool = False, db: Session = Depends(get_db_session)):
    return categories_service.category_tree(db, only_active=only_active)


@router.get("/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db_session)):
    return categories_service.get_category_detail(db, category_id)


@router.post("", status_code=201)
def create_category(payload: CategoryPayload, db: Session = Depends(get_db_session)):
    return categories_service.create_category(db, payload)


@router.put("/{category_id}")
def update_category(
    category_id: int,
    payload: CategoryUpdatePayload,
    db: Session = Depends(get_db_session),
):
    return categories_service.update_category(db, category_id, payload)


@router.delete("/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db_session)):
    return categories_service.delete_category(db, category_id)
