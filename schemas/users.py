from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.admin_user import AdminRole
from services.passwords import MIN_PASSWORD_LENGTH

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _normalize_email(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Invalid email format")
    return value


class LoginPayload(BaseModel):
    email: str
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserPayload(BaseModel):
    email: str
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(min_length=1, max_length=150)
    role: AdminRole = AdminRole.admin
    is_active: bool = Field(default=True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserUpdatePayload(BaseModel):
    email: str | None = None
    password: str | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)
    name: str | None = Field(default=None, min_length=1, max_length=150)
    role: AdminRole | None = None
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str | None) -> str | None:
        return _normalize_email(value)


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: AdminRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


__all__ = ["LoginPayload", "UserPayload", "UserResponse", "UserUpdatePayload"]
