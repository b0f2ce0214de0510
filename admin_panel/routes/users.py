"""Управление администраторами (только SUPER_ADMIN)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from admin_panel.dependencies import get_db_session, require_super_admin
from schemas.users import UserPayload, UserUpdatePayload
from services import users as users_service

router = APIRouter(
    prefix="/api/admin/users",
    tags=["AdminUsers"],
    dependencies=[Depends(require_super_admin)],
)


@router.get("")
def list_users(db: Session = Depends(get_db_session)):
    return users_service.list_users(db)


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db_session)):
    return users_service.serialize_user(users_service.get_user(db, user_id))


@router.post("", status_code=201)
def create_user(payload: UserPayload, db: Session = Depends(get_db_session)):
    return users_service.create_user(db, payload)


@router.put("/{user_id}")
def update_user(user_id: int, payload: UserUpdatePayload, db: Session = Depends(get_db_session)):
    return users_service.update_user(db, user_id, payload)


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db_session)):
    return users_service.delete_user(db, user_id)
