from __future__ import annotations

import re
import time
import unicodedata

from sqlalchemy import select
from sqlalchemy.orm import Session

from services.errors import InvalidInput

_UNSAFE_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")


def slugify(value: str) -> str:
    normalized = unicodedata.normalize("NFKD", value or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _UNSAFE_CHARS.sub("", ascii_text)
    slug = _WHITESPACE.sub("-", slug.strip())
    return slug.strip("-")


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def slug_exists(db: Session, model, slug: str, exclude_id: int | None = None) -> bool:
    query = select(model.id).where(model.slug == slug)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    return db.scalar(query.limit(1)) is not None


def generate_unique_slug(
    db: Session,
    model,
    value: str,
    exclude_id: int | None = None,
) -> str:
    """
    Строит slug из названия и делает его уникальным в таблице ``model``.

    При коллизии добавляется суффикс с текущим временем в миллисекундах,
    поэтому повторная генерация для того же имени даёт разные значения.
    """
    slug = slugify(value)
    if not slug:
        raise InvalidInput("slug_empty", "Slug cannot be empty")

    if slug_exists(db, model, slug, exclude_id=exclude_id):
        slug = f"{slug}-{_timestamp_ms()}"
    return slug


__all__ = ["generate_unique_slug", "slug_exists", "slugify"]
