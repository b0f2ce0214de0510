"""Модели и роли админов."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String

from database import Base


class AdminRole(str, Enum):
    super_admin = "SUPER_ADMIN"
    admin = "ADMIN"


class AdminUser(Base):
    __tablename__ = "admin_users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('SUPER_ADMIN', 'ADMIN')",
            name="ck_admin_users_role",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String(150), nullable=False)
    role = Column(
        String(32),
        nullable=False,
        default=AdminRole.admin.value,
        server_default=AdminRole.admin.value,
    )
    is_active = Column(Boolean, default=True, nullable=False, server_default="1")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.super_admin.value


__all__ = ["AdminRole", "AdminUser"]
