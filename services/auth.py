"""Логика аутентификации админов: проверка пароля и токены в cookie."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.admin_user import AdminUser
from services.passwords import verify_password
from utils.jwt_auth import create_access_token, decode_access_token

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "auth-token"


def authenticate_admin(db: Session, email: str, password: str) -> Optional[AdminUser]:
    user: AdminUser | None = db.execute(
        select(AdminUser).where(AdminUser.email == email.strip().lower())
    ).scalars().first()
    if not user or not user.is_active:
        logger.info("Login rejected for %s: unknown or inactive user", email)
        return None
    if not verify_password(password, user.password_hash):
        logger.info("Login rejected for %s: wrong password", email)
        return None
    return user


def issue_token(user: AdminUser) -> str:
    return create_access_token(
        user_id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
    )


def public_user(user: AdminUser) -> dict[str, Any]:
    return {"id": user.id, "email": user.email, "name": user.name, "role": user.role}


def get_user_from_token(db: Session, token: str | None) -> Optional[AdminUser]:
    """Пользователь по токену; HTTPException(401) при битом или просроченном токене."""

    payload = decode_access_token(token)
    try:
        user_id = int(payload.get("user_id"))
    except (TypeError, ValueError):
        return None

    user = db.get(AdminUser, user_id)
    if not user or not user.is_active:
        return None
    return user


__all__ = [
    "AUTH_COOKIE_NAME",
    "authenticate_admin",
    "get_user_from_token",
    "issue_token",
    "public_user",
]
