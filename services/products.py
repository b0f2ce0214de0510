"""Товары каталога: CRUD, проверка категории и спецификаций."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from models import Product, ProductImage
from schemas.catalog import ProductPayload, ProductUpdatePayload
from services.categories import ensure_category_exists
from services.errors import InvalidInput, NotFound
from services.media import MediaStorage, get_storage
from services.slugs import generate_unique_slug

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _normalize_specifications(raw: str | None) -> str | None:
    if raw is None or not raw.strip():
        return None
    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise InvalidInput(
            "invalid_specifications",
            "Invalid specifications JSON format",
        ) from exc
    return json.dumps(parsed, ensure_ascii=False)


def serialize_image(image: ProductImage, storage: MediaStorage | None = None) -> dict[str, Any]:
    storage = storage or get_storage()
    return {
        "id": int(image.id),
        "product_id": int(image.product_id),
        "filename": image.filename,
        "original_name": image.original_name,
        "path": image.path,
        "url": storage.url_for(image.path),
        "size": int(image.size or 0),
        "mime_type": image.mime_type,
        "is_main": bool(image.is_main),
        "sort_order": int(image.sort_order or 0),
    }


def serialize_product(product: Product) -> dict[str, Any]:
    category = product.category
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "description": product.description,
        "price": float(product.price) if product.price is not None else 0.0,
        "specifications": product.specifications,
        "meta_title": product.meta_title,
        "meta_description": product.meta_description,
        "meta_keywords": product.meta_keywords,
        "category_id": product.category_id,
        "category": (
            {"id": category.id, "name": category.name, "slug": category.slug}
            if category
            else None
        ),
        "sort_order": product.sort_order,
        "is_active": bool(product.is_active),
        "images": [serialize_image(image) for image in product.images],
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise NotFound("product_not_found", "Product not found")
    return product


def get_product_detail(db: Session, product_id: int) -> dict[str, Any]:
    return serialize_product(get_product(db, product_id))


def list_products(
    db: Session,
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    category_id: int | None = None,
    search: str | None = None,
    is_active: bool | None = None,
) -> dict[str, Any]:
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    query = select(Product)
    if category_id is not None:
        query = query.where(Product.category_id == category_id)

    needle = (search or "").strip()
    if needle:
        pattern = f"%{needle}%"
        query = query.where(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))

    if is_active is not None:
        query = query.where(Product.is_active.is_(is_active))

    total = int(db.scalar(select(func.count()).select_from(query.subquery())) or 0)
    products = (
        db.execute(
            query.options(selectinload(Product.category), selectinload(Product.images))
            .order_by(Product.sort_order.asc(), Product.created_at.desc(), Product.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        .scalars()
        .all()
    )

    return {
        "products": [serialize_product(product) for product in products],
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": (total + limit - 1) // limit,
    }


def create_product(db: Session, payload: ProductPayload) -> dict[str, Any]:
    ensure_category_exists(db, payload.category_id)
    specifications = _normalize_specifications(payload.specifications)

    product = Product(
        name=payload.name,
        slug=generate_unique_slug(db, Product, payload.name),
        description=payload.description,
        price=payload.price,
        specifications=specifications,
        meta_title=payload.meta_title,
        meta_description=payload.meta_description,
        meta_keywords=payload.meta_keywords,
        category_id=payload.category_id,
        sort_order=payload.sort_order,
        is_active=payload.is_active,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product %s created (slug=%s, category=%s)", product.id, product.slug, product.category_id)
    return serialize_product(product)


def update_product(db: Session, product_id: int, payload: ProductUpdatePayload) -> dict[str, Any]:
    product = get_product(db, product_id)
    fields = payload.model_fields_set

    if payload.category_id is not None:
        ensure_category_exists(db, payload.category_id)

    if "specifications" in fields:
        product.specifications = _normalize_specifications(payload.specifications)

    if payload.name is not None and payload.name != product.name:
        product.slug = generate_unique_slug(db, Product, payload.name, exclude_id=product.id)
        product.name = payload.name

    if payload.category_id is not None:
        product.category_id = payload.category_id
    if payload.description is not None:
        product.description = payload.description
    if payload.price is not None:
        product.price = payload.price
    for field in ("meta_title", "meta_description", "meta_keywords"):
        if field in fields:
            setattr(product, field, getattr(payload, field))
    if payload.sort_order is not None:
        product.sort_order = payload.sort_order
    if payload.is_active is not None:
        product.is_active = payload.is_active

    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product %s updated", product.id)
    return serialize_product(product)


def delete_product(db: Session, product_id: int, storage: MediaStorage | None = None) -> dict[str, str]:
    storage = storage or get_storage()
    product = get_product(db, product_id)
    image_paths = [image.path for image in product.images]

    db.delete(product)
    db.commit()
    logger.info("Product %s deleted with %s images", product_id, len(image_paths))

    for path in image_paths:
        if not storage.delete(path):
            logger.warning("Image file %s of deleted product %s was not removed", path, product_id)
    return {"status": "ok"}


__all__ = [
    "create_product",
    "delete_product",
    "get_product",
    "get_product_detail",
    "list_products",
    "serialize_image",
    "serialize_product",
    "update_product",
]
