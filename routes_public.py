"""Публичная витрина: страницы по slug и дерево активных категорий."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from database import get_db
from services import categories as categories_service
from services import pages as pages_service
from services.errors import NotFound

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(BASE_DIR / "templates"))

router = APIRouter(tags=["Public"])


@router.get("/api/public/pages/{slug}")
def api_public_page(slug: str, db: Session = Depends(get_db)):
    return pages_service.get_public_page(db, slug)


@router.get("/api/public/categories")
def api_public_categories(db: Session = Depends(get_db)):
    return categories_service.category_tree(db, only_active=True)


@router.get("/{slug}", response_class=HTMLResponse)
def public_page(slug: str, request: Request, db: Session = Depends(get_db)):
    try:
        page = pages_service.get_public_page(db, slug)
    except NotFound:
        return TEMPLATES.TemplateResponse(
            request,
            "not_found.html",
            {"title": "Page Not Found"},
            status_code=404,
        )
    return TEMPLATES.TemplateResponse(request, "page.html", {"page": page})
