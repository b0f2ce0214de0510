from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX_LENGTH = 200
META_TITLE_MAX_LENGTH = 60
META_DESCRIPTION_MAX_LENGTH = 160


def _require_text(value: str | None, message: str) -> str | None:
    if value is None:
        return None
    if not value.strip():
        raise ValueError(message)
    return value


def _empty_to_none(value: str | None) -> str | None:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PagePayload(BaseModel):
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    content: str
    meta_title: str | None = Field(default=None, max_length=META_TITLE_MAX_LENGTH, alias="metaTitle")
    meta_description: str | None = Field(
        default=None, max_length=META_DESCRIPTION_MAX_LENGTH, alias="metaDescription"
    )
    is_active: bool = Field(default=True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title")
    @classmethod
    def _validate_title(cls, value: str) -> str:
        return _require_text(value, "Title is required")

    @field_validator("content")
    @classmethod
    def _validate_content(cls, value: str) -> str:
        return _require_text(value, "Content is required")

    @field_validator("meta_title", "meta_description", mode="before")
    @classmethod
    def _normalize_meta(cls, value: str | None) -> str | None:
        return _empty_to_none(value)


class PageUpdatePayload(BaseModel):
    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    content: str | None = None
    meta_title: str | None = Field(default=None, max_length=META_TITLE_MAX_LENGTH, alias="metaTitle")
    meta_description: str | None = Field(
        default=None, max_length=META_DESCRIPTION_MAX_LENGTH, alias="metaDescription"
    )
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("title")
    @classmethod
    def _validate_title(cls, value: str | None) -> str | None:
        return _require_text(value, "Title is required")

    @field_validator("content")
    @classmethod
    def _validate_content(cls, value: str | None) -> str | None:
        return _require_text(value, "Content is required")

    @field_validator("meta_title", "meta_description", mode="before")
    @classmethod
    def _normalize_meta(cls, value: str | None) -> str | None:
        return _empty_to_none(value)


__all__ = [
    "META_DESCRIPTION_MAX_LENGTH",
    "META_TITLE_MAX_LENGTH",
    "PagePayload",
    "PageUpdatePayload",
    "TITLE_MAX_LENGTH",
]
