"""Маршруты авторизации админов."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from admin_panel.dependencies import get_current_admin, get_db_session
from config import get_settings
from models.admin_user import AdminUser
from schemas.users import LoginPayload
from services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["AdminAuth"])


@router.post("/login")
def login(payload: LoginPayload, response: Response, db: Session = Depends(get_db_session)):
    user = auth_service.authenticate_admin(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="invalid_credentials")

    settings = get_settings()
    response.set_cookie(
        auth_service.AUTH_COOKIE_NAME,
        auth_service.issue_token(user),
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.jwt_ttl_seconds,
        path="/",
    )
    return {"success": True, "user": auth_service.public_user(user)}


@router.get("/me")
def me(user: AdminUser = Depends(get_current_admin)):
    return {"user": auth_service.public_user(user)}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(
        auth_service.AUTH_COOKIE_NAME,
        httponly=True,
        secure=get_settings().cookie_secure,
        samesite="lax",
        path="/",
    )
    return {"success": True}
