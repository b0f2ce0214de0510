"""Общие зависимости для маршрутов админки."""

from typing import Iterator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from models.admin_user import AdminRole, AdminUser
from services import auth as auth_service


def get_db_session() -> Iterator[Session]:
    from database import SessionLocal  # импорт внутри, чтобы избежать циклов

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_admin(request: Request, db: Session = Depends(get_db_session)) -> AdminUser:
    token = request.cookies.get(auth_service.AUTH_COOKIE_NAME)
    user = auth_service.get_user_from_token(db, token)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="user_not_found")
    return user


def require_super_admin(user: AdminUser = Depends(get_current_admin)) -> AdminUser:
    if user.role != AdminRole.super_admin.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
    return user
