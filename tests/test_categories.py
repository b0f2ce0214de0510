from __future__ import annotations

import pytest
from sqlalchemy import select, update

from models import Category
from schemas.catalog import CategoryPayload, CategoryUpdatePayload
from services import categories as categories_service
from services.errors import Conflict, DataIntegrityError, InvalidInput, NotFound


def _parent_of(db_session, category_id: int) -> int | None:
    return db_session.scalar(select(Category.parent_id).where(Category.id == category_id))


def test_create_category_generates_slug_and_links_parent(db_session):
    root = categories_service.create_category(db_session, CategoryPayload(name="Electronics"))
    child = categories_service.create_category(
        db_session,
        CategoryPayload.model_validate({"name": " Phones ", "parentId": root["id"], "sortOrder": 2}),
    )

    assert root["slug"] == "electronics"
    assert child["name"] == "Phones"
    assert child["parent_id"] == root["id"]
    assert child["sort_order"] == 2
    assert child["products_count"] == 0


def test_create_category_with_missing_parent_writes_nothing(db_session):
    with pytest.raises(NotFound) as exc_info:
        categories_service.create_category(db_session, CategoryPayload(name="Orphan", parent_id=999))

    assert exc_info.value.code == "parent_category_not_found"
    assert db_session.scalar(select(Category.id)) is None


def test_category_cannot_be_its_own_parent(db_session, make_category):
    root = make_category("Root")

    with pytest.raises(Conflict) as exc_info:
        categories_service.update_category(db_session, root.id, CategoryUpdatePayload(parent_id=root.id))

    assert exc_info.value.code == "category_self_parent"
    assert _parent_of(db_session, root.id) is None


def test_category_cannot_move_under_its_descendant(db_session, make_category):
    a = make_category("A")
    b = make_category("B", parent=a)
    c = make_category("C", parent=b)

    with pytest.raises(Conflict) as exc_info:
        categories_service.update_category(db_session, a.id, CategoryUpdatePayload(parent_id=c.id))

    assert exc_info.value.code == "category_cycle"
    assert _parent_of(db_session, a.id) is None
    assert _parent_of(db_session, b.id) == a.id
    assert _parent_of(db_session, c.id) == b.id


def test_category_can_move_to_another_branch(db_session, make_category):
    a = make_category("A")
    b = make_category("B", parent=a)
    other = make_category("Other")

    result = categories_service.update_category(db_session, b.id, CategoryUpdatePayload(parent_id=other.id))

    assert result["parent_id"] == other.id
    assert result["parent"]["slug"] == "other"


def test_explicit_null_parent_makes_category_root(db_session, make_category):
    a = make_category("A")
    b = make_category("B", parent=a)

    categories_service.update_category(db_session, b.id, CategoryUpdatePayload.model_validate({"parentId": None}))

    assert _parent_of(db_session, b.id) is None


def test_omitted_parent_keeps_current_one(db_session, make_category):
    a = make_category("A")
    b = make_category("B", parent=a)

    categories_service.update_category(db_session, b.id, CategoryUpdatePayload(description="Updated"))

    assert _parent_of(db_session, b.id) == a.id


def test_corrupted_tree_is_reported_instead_of_looping(db_session, make_category):
    target = make_category("Target")
    b = make_category("B")
    c = make_category("C", parent=b)
    db_session.execute(update(Category).where(Category.id == b.id).values(parent_id=c.id))
    db_session.commit()

    with pytest.raises(DataIntegrityError) as exc_info:
        categories_service.validate_parent(db_session, target.id, b.id)

    assert exc_info.value.code == "category_tree_corrupted"


def test_renaming_category_regenerates_slug(db_session, make_category):
    phones = make_category("Phones")

    result = categories_service.update_category(db_session, phones.id, CategoryUpdatePayload(name="Smart Phones"))

    assert result["slug"] == "smart-phones"


def test_delete_category_with_children_is_refused(db_session, make_category):
    parent = make_category("Parent")
    make_category("Child", parent=parent)

    with pytest.raises(Conflict) as exc_info:
        categories_service.delete_category(db_session, parent.id)

    assert exc_info.value.code == "category_has_children"
    assert db_session.get(Category, parent.id) is not None


def test_delete_category_with_products_is_refused(db_session, make_category, make_product):
    phones = make_category("Phones")
    make_product("Phone", phones, is_active=False)

    with pytest.raises(Conflict) as exc_info:
        categories_service.delete_category(db_session, phones.id)

    assert exc_info.value.code == "category_has_products"


def test_delete_leaf_category(db_session, make_category):
    leaf = make_category("Leaf")

    assert categories_service.delete_category(db_session, leaf.id) == {"status": "ok"}
    assert db_session.get(Category, leaf.id) is None


def test_delete_missing_category(db_session):
    with pytest.raises(NotFound):
        categories_service.delete_category(db_session, 404)


def test_category_tree_nests_children_and_counts_products(db_session, make_category, make_product):
    electronics = make_category("Electronics", sort_order=1)
    books = make_category("Books", sort_order=0)
    phones = make_category("Phones", parent=electronics)
    make_category("Hidden", parent=electronics, is_active=False)
    make_product("Phone", phones)

    tree = categories_service.category_tree(db_session)

    assert [node["name"] for node in tree] == ["Books", "Electronics"]
    children = tree[1]["children"]
    assert [node["name"] for node in children] == ["Hidden", "Phones"]
    assert children[1]["products_count"] == 1
    assert books.id == tree[0]["id"]

    active_tree = categories_service.category_tree(db_session, only_active=True)
    assert [node["name"] for node in active_tree[1]["children"]] == ["Phones"]


def test_every_category_reaches_root_within_category_count(db_session, make_category):
    a = make_category("A")
    b = make_category("B", parent=a)
    c = make_category("C", parent=b)
    categories_service.update_category(db_session, c.id, CategoryUpdatePayload(parent_id=a.id))

    categories = db_session.execute(select(Category)).scalars().all()
    parents = {category.id: category.parent_id for category in categories}
    for category in categories:
        current, steps = category.id, 0
        while current is not None:
            current = parents[current]
            steps += 1
            assert steps <= len(categories)


def test_active_tree_hides_whole_branch_of_inactive_category(db_session, make_category):
    hidden = make_category("Hidden", is_active=False)
    child = make_category("Child", parent=hidden)
    make_category("Grandchild", parent=child)
    make_category("Top")

    tree = categories_service.category_tree(db_session, only_active=True)

    assert [node["name"] for node in tree] == ["Top"]
    assert tree[0]["children"] == []


def test_failed_rename_leaves_category_untouched(db_session, make_category):
    a = make_category("A")
    b = make_category("B")

    with pytest.raises(InvalidInput) as exc_info:
        categories_service.update_category(
            db_session,
            b.id,
            CategoryUpdatePayload(name="!!!", parent_id=a.id),
        )

    assert exc_info.value.code == "slug_empty"
    assert b.parent_id is None
    assert b.name == "B"
