"""Категории каталога: дерево, проверки родителя и защита от удаления."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from models import Category, Product
from schemas.catalog import CategoryPayload, CategoryUpdatePayload
from services.errors import Conflict, DataIntegrityError, NotFound
from services.slugs import generate_unique_slug

logger = logging.getLogger(__name__)


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFound("category_not_found", "Category not found")
    return category


def ensure_category_exists(db: Session, category_id: int, *, code: str = "category_not_found") -> None:
    exists = db.scalar(select(Category.id).where(Category.id == category_id))
    if exists is None:
        raise NotFound(code, "Category not found")


def _products_count(db: Session, category_id: int) -> int:
    return int(
        db.scalar(select(func.count(Product.id)).where(Product.category_id == category_id)) or 0
    )


def _children_count(db: Session, category_id: int) -> int:
    return int(
        db.scalar(select(func.count(Category.id)).where(Category.parent_id == category_id)) or 0
    )


def _brief(category: Category | None) -> dict[str, Any] | None:
    if category is None:
        return None
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "parent_id": category.parent_id,
        "sort_order": category.sort_order,
        "is_active": bool(category.is_active),
    }


def serialize_category(category: Category, products_count: int | None = None) -> dict[str, Any]:
    data = _brief(category) or {}
    data.update(
        {
            "description": category.description,
            "created_at": category.created_at.isoformat() if category.created_at else None,
            "updated_at": category.updated_at.isoformat() if category.updated_at else None,
            "parent": _brief(category.parent),
            "children": [_brief(child) for child in category.children],
            "products_count": products_count if products_count is not None else len(category.products),
        }
    )
    return data


def _product_counts(db: Session) -> dict[int, int]:
    rows = db.execute(
        select(Product.category_id, func.count(Product.id)).group_by(Product.category_id)
    ).all()
    return {int(category_id): int(count) for category_id, count in rows}


def get_category_detail(db: Session, category_id: int) -> dict[str, Any]:
    category = get_category(db, category_id)
    return serialize_category(category, _products_count(db, category.id))


def list_categories(db: Session) -> list[dict[str, Any]]:
    categories = (
        db.execute(
            select(Category)
            .options(selectinload(Category.parent), selectinload(Category.children))
            .order_by(Category.sort_order, Category.name)
        )
        .scalars()
        .all()
    )
    counts = _product_counts(db)
    return [serialize_category(category, counts.get(category.id, 0)) for category in categories]


def category_tree(db: Session, *, only_active: bool = False) -> list[dict[str, Any]]:
    """Вложенное дерево категорий: корневые узлы с ``children`` любой глубины."""

    query = select(Category).order_by(Category.sort_order, Category.name)
    if only_active:
        query = query.where(Category.is_active.is_(True))
    categories = db.execute(query).scalars().all()
    counts = _product_counts(db)

    nodes: dict[int, dict[str, Any]] = {}
    for category in categories:
        node = _brief(category) or {}
        node["products_count"] = counts.get(category.id, 0)
        node["children"] = []
        nodes[category.id] = node

    roots: list[dict[str, Any]] = []
    for category in categories:
        node = nodes[category.id]
        if category.parent_id is None:
            roots.append(node)
            continue
        parent_node = nodes.get(category.parent_id)
        # Родитель отфильтрован: ветка скрыта целиком, а не поднимается в корень.
        if parent_node is not None:
            parent_node["children"].append(node)
    return roots


def validate_parent(db: Session, category_id: int | None, parent_id: int) -> None:
    """
    Проверяет, что ``parent_id`` можно назначить категории ``category_id``.

    Для новой категории ``category_id`` равен None: проверяется только
    существование родителя. Обход предков ограничен числом категорий, так
    что испорченное дерево даёт DataIntegrityError, а не бесконечный цикл.
    """
    if category_id is not None and parent_id == category_id:
        raise Conflict("category_self_parent", "Category cannot be its own parent")

    ensure_category_exists(db, parent_id, code="parent_category_not_found")

    if category_id is None:
        return

    limit = int(db.scalar(select(func.count(Category.id))) or 0)
    current: int | None = parent_id
    steps = 0
    while current is not None:
        if current == category_id:
            raise Conflict(
                "category_cycle",
                "Cannot create circular reference in category hierarchy",
            )
        if steps >= limit:
            logger.error(
                "Category tree is corrupted: ancestor walk from %s exceeded %s steps",
                parent_id,
                limit,
            )
            raise DataIntegrityError("category_tree_corrupted", "Category tree contains a cycle")
        current = db.scalar(select(Category.parent_id).where(Category.id == current))
        steps += 1


def create_category(db: Session, payload: CategoryPayload) -> dict[str, Any]:
    if payload.parent_id is not None:
        validate_parent(db, None, payload.parent_id)

    category = Category(
        name=payload.name,
        slug=generate_unique_slug(db, Category, payload.name),
        description=payload.description,
        parent_id=payload.parent_id,
        sort_order=payload.sort_order,
        is_active=payload.is_active,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Category %s created (slug=%s, parent=%s)", category.id, category.slug, category.parent_id)
    return serialize_category(category, 0)


def update_category(db: Session, category_id: int, payload: CategoryUpdatePayload) -> dict[str, Any]:
    category = get_category(db, category_id)
    fields = payload.model_fields_set

    # Все проверки до первого изменения объекта.
    if "parent_id" in fields and payload.parent_id is not None:
        validate_parent(db, category.id, payload.parent_id)

    new_slug = None
    if payload.name is not None and payload.name != category.name:
        new_slug = generate_unique_slug(db, Category, payload.name, exclude_id=category.id)

    if "parent_id" in fields:
        category.parent_id = payload.parent_id
    if new_slug is not None:
        category.slug = new_slug
        category.name = payload.name

    if "description" in fields:
        category.description = payload.description
    if payload.sort_order is not None:
        category.sort_order = payload.sort_order
    if payload.is_active is not None:
        category.is_active = payload.is_active

    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Category %s updated", category.id)
    return serialize_category(category, _products_count(db, category.id))


def delete_category(db: Session, category_id: int) -> dict[str, str]:
    category = get_category(db, category_id)

    if _children_count(db, category.id) > 0:
        raise Conflict(
            "category_has_children",
            "Cannot delete category with subcategories. Move or delete subcategories first.",
        )
    if _products_count(db, category.id) > 0:
        raise Conflict(
            "category_has_products",
            "Cannot delete category with products. Move or delete products first.",
        )

    db.delete(category)
    db.commit()
    logger.info("Category %s deleted", category_id)
    return {"status": "ok"}


__all__ = [
    "category_tree",
    "create_category",
    "delete_category",
    "ensure_category_exists",
    "get_category",
    "get_category_detail",
    "list_categories",
    "serialize_category",
    "update_category",
    "validate_parent",
]
