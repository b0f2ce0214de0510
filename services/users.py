"""Управление админами: CRUD и защита последнего супер-админа."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.admin_user import AdminRole, AdminUser
from schemas.users import UserPayload, UserResponse, UserUpdatePayload
from services.errors import Conflict, NotFound
from services.passwords import hash_password

logger = logging.getLogger(__name__)


def serialize_user(user: AdminUser) -> dict[str, Any]:
    return UserResponse.model_validate(user).model_dump(mode="json")


def get_user(db: Session, user_id: int) -> AdminUser:
    user = db.get(AdminUser, user_id)
    if not user:
        raise NotFound("user_not_found", "User not found")
    return user


def list_users(db: Session) -> list[dict[str, Any]]:
    users = db.execute(select(AdminUser).order_by(AdminUser.id.asc())).scalars().all()
    return [serialize_user(user) for user in users]


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    query = select(AdminUser.id).where(AdminUser.email == email)
    if exclude_id is not None:
        query = query.where(AdminUser.id != exclude_id)
    return db.scalar(query.limit(1)) is not None


def _other_active_super_admins(db: Session, user_id: int) -> int:
    return int(
        db.scalar(
            select(func.count(AdminUser.id)).where(
                AdminUser.role == AdminRole.super_admin.value,
                AdminUser.is_active.is_(True),
                AdminUser.id != user_id,
            )
        )
        or 0
    )


def _ensure_not_last_super_admin(db: Session, user: AdminUser) -> None:
    if user.is_super_admin and _other_active_super_admins(db, user.id) == 0:
        raise Conflict("last_super_admin", "Cannot remove the last SUPER_ADMIN user")


def create_user(db: Session, payload: UserPayload) -> dict[str, Any]:
    if _email_taken(db, payload.email):
        raise Conflict("email_taken", "Email is already taken")

    user = AdminUser(
        email=payload.email,
        password_hash=hash_password(payload.password),
        name=payload.name.strip(),
        role=payload.role.value,
        is_active=payload.is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Admin user %s created (role=%s)", user.id, user.role)
    return serialize_user(user)


def update_user(db: Session, user_id: int, payload: UserUpdatePayload) -> dict[str, Any]:
    user = get_user(db, user_id)

    if payload.email is not None and _email_taken(db, payload.email, exclude_id=user.id):
        raise Conflict("email_taken", "Email is already taken")

    demoted = payload.role is not None and payload.role != AdminRole.super_admin
    deactivated = payload.is_active is False
    if demoted or deactivated:
        _ensure_not_last_super_admin(db, user)

    if payload.email is not None:
        user.email = payload.email
    if payload.name is not None:
        user.name = payload.name.strip()
    if payload.role is not None:
        user.role = payload.role.value
    if payload.is_active is not None:
        user.is_active = payload.is_active
    if payload.password:
        user.password_hash = hash_password(payload.password)

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Admin user %s updated", user.id)
    return serialize_user(user)


def delete_user(db: Session, user_id: int) -> dict[str, str]:
    user = get_user(db, user_id)
    _ensure_not_last_super_admin(db, user)

    db.delete(user)
    db.commit()
    logger.info("Admin user %s deleted", user_id)
    return {"status": "ok"}


__all__ = [
    "create_user",
    "delete_user",
    "get_user",
    "list_users",
    "serialize_user",
    "update_user",
]
