from __future__ import annotations

from decimal import Decimal
import json

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from models import Product, ProductImage
from schemas.catalog import ProductPayload, ProductUpdatePayload
from services import products as products_service
from services.errors import InvalidInput, NotFound


def _payload(category_id: int, **overrides) -> ProductPayload:
    data = {
        "name": "iPhone 15 Pro",
        "description": "Flagship phone",
        "price": "1199.90",
        "categoryId": category_id,
    }
    data.update(overrides)
    return ProductPayload.model_validate(data)


def test_create_product(db_session, make_category):
    phones = make_category("Phones")

    product = products_service.create_product(
        db_session,
        _payload(phones.id, specifications='{"memory": "256 GB", "цвет": "titan"}'),
    )

    assert product["slug"] == "iphone-15-pro"
    assert product["price"] == pytest.approx(1199.9)
    assert product["category"] == {"id": phones.id, "name": "Phones", "slug": "phones"}
    assert json.loads(product["specifications"]) == {"memory": "256 GB", "цвет": "titan"}
    assert product["images"] == []


def test_create_product_with_missing_category_writes_nothing(db_session):
    with pytest.raises(NotFound) as exc_info:
        products_service.create_product(db_session, _payload(999))

    assert exc_info.value.code == "category_not_found"
    assert db_session.scalar(select(func.count(Product.id))) == 0


def test_create_product_in_inactive_category_is_allowed(db_session, make_category):
    archive = make_category("Archive", is_active=False)

    product = products_service.create_product(db_session, _payload(archive.id))

    assert product["category_id"] == archive.id


def test_invalid_specifications_are_rejected(db_session, make_category):
    phones = make_category("Phones")

    with pytest.raises(InvalidInput) as exc_info:
        products_service.create_product(db_session, _payload(phones.id, specifications="{not json"))

    assert exc_info.value.code == "invalid_specifications"
    assert db_session.scalar(select(func.count(Product.id))) == 0


def test_negative_price_is_rejected():
    with pytest.raises(ValidationError):
        _payload(1, price="-1")


@pytest.mark.parametrize("price", ["abc", None, "", [1]])
def test_non_numeric_price_is_a_validation_error(price):
    with pytest.raises(ValidationError):
        _payload(1, price=price)


def test_non_numeric_price_in_update_is_a_validation_error():
    with pytest.raises(ValidationError):
        ProductUpdatePayload.model_validate({"price": "ten"})


def test_update_product_moves_to_existing_category_only(db_session, make_category, make_product):
    phones = make_category("Phones")
    tablets = make_category("Tablets")
    product = make_product("Pad", phones)

    with pytest.raises(NotFound):
        products_service.update_product(db_session, product.id, ProductUpdatePayload(category_id=999))
    assert db_session.get(Product, product.id).category_id == phones.id

    result = products_service.update_product(
        db_session,
        product.id,
        ProductUpdatePayload.model_validate({"categoryId": tablets.id, "price": 5, "specifications": ""}),
    )
    assert result["category_id"] == tablets.id
    assert result["price"] == 5.0
    assert result["specifications"] is None


def test_update_product_rename_changes_slug(db_session, make_category, make_product):
    phones = make_category("Phones")
    product = make_product("Old name", phones)

    result = products_service.update_product(db_session, product.id, ProductUpdatePayload(name="New name"))

    assert result["slug"] == "new-name"


def test_list_products_filters_and_paginates(db_session, make_category, make_product):
    phones = make_category("Phones")
    books = make_category("Books")
    for index in range(3):
        make_product(f"Phone {index}", phones, sort_order=index)
    make_product("Hidden phone", phones, sort_order=10, is_active=False)
    make_product("Novel", books, description="A long story")

    by_category = products_service.list_products(db_session, category_id=phones.id, limit=2)
    assert by_category["total"] == 4
    assert by_category["total_pages"] == 2
    assert [item["name"] for item in by_category["products"]] == ["Phone 0", "Phone 1"]

    active_only = products_service.list_products(db_session, category_id=phones.id, is_active=True)
    assert active_only["total"] == 3

    found = products_service.list_products(db_session, search="STORY")
    assert [item["name"] for item in found["products"]] == ["Novel"]


def test_delete_product_removes_images_and_files(db_session, storage, make_category, make_product):
    phones = make_category("Phones")
    product = make_product("Phone", phones)
    path = storage.store(b"image-bytes", "phone.png", "products")
    db_session.add(
        ProductImage(
            product_id=product.id,
            filename="phone.png",
            original_name="phone.png",
            path=path,
            size=11,
            mime_type="image/png",
            is_main=True,
        )
    )
    db_session.commit()

    assert products_service.delete_product(db_session, product.id, storage=storage) == {"status": "ok"}

    assert db_session.get(Product, product.id) is None
    assert db_session.scalar(select(func.count(ProductImage.id))) == 0
    assert not (storage.root / path).exists()


def test_price_is_stored_as_decimal(db_session, make_category):
    phones = make_category("Phones")
    created = products_service.create_product(db_session, _payload(phones.id, price=10.1))

    stored = db_session.get(Product, created["id"])
    assert Decimal(stored.price) == Decimal("10.10")
