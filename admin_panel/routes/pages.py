"""Статические страницы в админке."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from admin_panel.dependencies import get_current_admin, get_db_session
from schemas.pages import PagePayload, PageUpdatePayload
from services import pages as pages_service

router = APIRouter(
    prefix="/api/admin/pages",
    tags=["AdminPages"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("")
def list_pages(
    page: int = Query(1, ge=1),
    limit: int = Query(pages_service.DEFAULT_PAGE_SIZE, ge=1, le=pages_service.MAX_PAGE_SIZE),
    search: str | None = None,
    is_active: bool | None = Query(None, alias="isActive"),
    db: Session = Depends(get_db_session),
):
    return pages_service.list_pages(db, page=page, limit=limit, search=search, is_active=is_active)


@router.get("/{page_id}")
def get_page(page_id: int, db: Session = Depends(get_db_session)):
    return pages_service.serialize_page(pages_service.get_page(db, page_id))


@router.post("", status_code=201)
def create_page(payload: PagePayload, db: Session = Depends(get_db_session)):
    return pages_service.create_page(db, payload)


@router.put("/{page_id}")
def update_page(page_id: int, payload: PageUpdatePayload, db: Session = Depends(get_db_session)):
    return pages_service.update_page(db, page_id, payload)


@router.delete("/{page_id}")
def delete_page(page_id: int, db: Session = Depends(get_db_session)):
    return pages_service.delete_page(db, page_id)
