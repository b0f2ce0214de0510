"""Статические страницы витрины."""

from __future__ import annotations

import logging
import re
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from models import Page
from schemas.pages import META_DESCRIPTION_MAX_LENGTH, PagePayload, PageUpdatePayload
from services.errors import Conflict, NotFound
from services.slugs import generate_unique_slug

logger = logging.getLogger(__name__)

SYSTEM_PAGE_SLUGS = frozenset({"home", "about", "contact", "privacy", "terms"})
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

_TAG_RE = re.compile(r"<[^>]*>")


def serialize_page(page: Page) -> dict[str, Any]:
    return {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "content": page.content,
        "meta_title": page.meta_title,
        "meta_description": page.meta_description,
        "is_active": bool(page.is_active),
        "created_at": page.created_at.isoformat() if page.created_at else None,
        "updated_at": page.updated_at.isoformat() if page.updated_at else None,
    }


def get_page(db: Session, page_id: int) -> Page:
    page = db.get(Page, page_id)
    if not page:
        raise NotFound("page_not_found", "Page not found")
    return page


def list_pages(
    db: Session,
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    search: str | None = None,
    is_active: bool | None = None,
) -> dict[str, Any]:
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    query = select(Page)
    needle = (search or "").strip()
    if needle:
        pattern = f"%{needle}%"
        query = query.where(or_(Page.title.ilike(pattern), Page.content.ilike(pattern)))
    if is_active is not None:
        query = query.where(Page.is_active.is_(is_active))

    total = int(db.scalar(select(func.count()).select_from(query.subquery())) or 0)
    rows = (
        db.execute(
            query.order_by(Page.created_at.desc(), Page.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return {
        "pages": [serialize_page(row) for row in rows],
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": (total + limit - 1) // limit,
    }


def create_page(db: Session, payload: PagePayload) -> dict[str, Any]:
    page = Page(
        title=payload.title,
        slug=generate_unique_slug(db, Page, payload.title),
        content=payload.content,
        meta_title=payload.meta_title,
        meta_description=payload.meta_description,
        is_active=payload.is_active,
    )
    db.add(page)
    db.commit()
    db.refresh(page)
    logger.info("Page %s created (slug=%s)", page.id, page.slug)
    return serialize_page(page)


def update_page(db: Session, page_id: int, payload: PageUpdatePayload) -> dict[str, Any]:
    page = get_page(db, page_id)
    fields = payload.model_fields_set

    if payload.title is not None and payload.title != page.title:
        page.slug = generate_unique_slug(db, Page, payload.title, exclude_id=page.id)
        page.title = payload.title
    if payload.content is not None:
        page.content = payload.content
    if "meta_title" in fields:
        page.meta_title = payload.meta_title
    if "meta_description" in fields:
        page.meta_description = payload.meta_description
    if payload.is_active is not None:
        page.is_active = payload.is_active

    db.add(page)
    db.commit()
    db.refresh(page)
    logger.info("Page %s updated", page.id)
    return serialize_page(page)


def delete_page(db: Session, page_id: int) -> dict[str, str]:
    page = get_page(db, page_id)
    if page.slug in SYSTEM_PAGE_SLUGS:
        raise Conflict("system_page", "This page cannot be deleted as it is a system page")

    db.delete(page)
    db.commit()
    logger.info("Page %s deleted", page_id)
    return {"status": "ok"}


def plain_text_excerpt(html: str, length: int = META_DESCRIPTION_MAX_LENGTH) -> str:
    return _TAG_RE.sub("", html or "")[:length]


def get_public_page(db: Session, slug: str) -> dict[str, Any]:
    """Активная страница по slug вместе с SEO-полями для витрины."""

    page = db.execute(
        select(Page).where(Page.slug == slug, Page.is_active.is_(True))
    ).scalars().first()
    if not page:
        raise NotFound("page_not_found", "Page not found")

    payload = serialize_page(page)
    payload["seo"] = {
        "title": page.meta_title or page.title,
        "description": page.meta_description or plain_text_excerpt(page.content),
    }
    return payload


__all__ = [
    "SYSTEM_PAGE_SLUGS",
    "create_page",
    "delete_page",
    "get_page",
    "get_public_page",
    "list_pages",
    "plain_text_excerpt",
    "serialize_page",
    "update_page",
]
