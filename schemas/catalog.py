from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _parse_price(value: Decimal | str | int | float | None) -> Decimal | None:
    if value is None or isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("Invalid price")


def _blank_to_none(value: str | None) -> str | None:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CategoryPayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    parent_id: int | None = Field(default=None, alias="parentId")
    sort_order: int = Field(default=0, alias="sortOrder")
    is_active: bool = Field(default=True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class CategoryUpdatePayload(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    parent_id: int | None = Field(default=None, alias="parentId")
    sort_order: int | None = Field(default=None, alias="sortOrder")
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class ProductPayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    specifications: str | None = None
    meta_title: str | None = Field(default=None, max_length=255, alias="metaTitle")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    meta_keywords: str | None = Field(default=None, alias="metaKeywords")
    category_id: int = Field(alias="categoryId")
    sort_order: int = Field(default=0, alias="sortOrder")
    is_active: bool = Field(default=True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Decimal | str | int | float | None) -> Decimal | None:
        return _parse_price(value)

    @field_validator("specifications", mode="before")
    @classmethod
    def _normalize_specifications(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class ProductUpdatePayload(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    specifications: str | None = None
    meta_title: str | None = Field(default=None, max_length=255, alias="metaTitle")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    meta_keywords: str | None = Field(default=None, alias="metaKeywords")
    category_id: int | None = Field(default=None, alias="categoryId")
    sort_order: int | None = Field(default=None, alias="sortOrder")
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Decimal | str | int | float | None) -> Decimal | None:
        return _parse_price(value)

    @field_validator("specifications", mode="before")
    @classmethod
    def _normalize_specifications(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


__all__ = [
    "CategoryPayload",
    "CategoryUpdatePayload",
    "ProductPayload",
    "ProductUpdatePayload",
]
