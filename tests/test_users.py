from __future__ import annotations

import pytest
from pydantic import ValidationError

from models import AdminRole, AdminUser
from schemas.users import UserPayload, UserUpdatePayload
from services import users as users_service
from services.errors import Conflict
from services.passwords import verify_password


def test_create_user_normalizes_email_and_hashes_password(db_session):
    user = users_service.create_user(
        db_session,
        UserPayload(email=" Admin@Example.com ", password="secret1", name="Admin"),
    )

    stored = db_session.get(AdminUser, user["id"])
    assert user["email"] == "admin@example.com"
    assert user["role"] == "ADMIN"
    assert "password_hash" not in user
    assert verify_password("secret1", stored.password_hash)


def test_duplicate_email_is_rejected(db_session, make_admin):
    make_admin("taken@example.com")

    with pytest.raises(Conflict) as exc_info:
        users_service.create_user(
            db_session,
            UserPayload(email="taken@example.com", password="secret1", name="Other"),
        )

    assert exc_info.value.code == "email_taken"


@pytest.mark.parametrize(
    "data",
    [
        {"email": "not-an-email", "password": "secret1", "name": "A"},
        {"email": "a@example.com", "password": "short", "name": "A"},
        {"email": "a@example.com", "password": "secret1", "name": "A", "role": "OWNER"},
    ],
)
def test_user_payload_validation(data):
    with pytest.raises(ValidationError):
        UserPayload.model_validate(data)


def test_last_super_admin_cannot_be_deleted(db_session, make_admin):
    owner = make_admin("owner@example.com", role=AdminRole.super_admin)
    helper = make_admin("helper@example.com")

    with pytest.raises(Conflict) as exc_info:
        users_service.delete_user(db_session, owner.id)
    assert exc_info.value.code == "last_super_admin"
    assert db_session.get(AdminUser, owner.id) is not None

    assert users_service.delete_user(db_session, helper.id) == {"status": "ok"}


def test_super_admin_can_be_deleted_when_another_is_active(db_session, make_admin):
    first = make_admin("first@example.com", role=AdminRole.super_admin)
    make_admin("second@example.com", role=AdminRole.super_admin)

    assert users_service.delete_user(db_session, first.id) == {"status": "ok"}


def test_inactive_super_admin_does_not_count(db_session, make_admin):
    owner = make_admin("owner@example.com", role=AdminRole.super_admin)
    make_admin("retired@example.com", role=AdminRole.super_admin, is_active=False)

    with pytest.raises(Conflict):
        users_service.delete_user(db_session, owner.id)


@pytest.mark.parametrize("data", [{"role": "ADMIN"}, {"isActive": False}])
def test_last_super_admin_cannot_be_demoted_or_deactivated(db_session, make_admin, data):
    owner = make_admin("owner@example.com", role=AdminRole.super_admin)

    with pytest.raises(Conflict):
        users_service.update_user(db_session, owner.id, UserUpdatePayload.model_validate(data))

    stored = db_session.get(AdminUser, owner.id)
    assert stored.role == AdminRole.super_admin.value
    assert stored.is_active is True


def test_update_user_changes_password(db_session, make_admin):
    user = make_admin("staff@example.com")

    users_service.update_user(db_session, user.id, UserUpdatePayload(password="new-secret", name="Staff"))

    stored = db_session.get(AdminUser, user.id)
    assert stored.name == "Staff"
    assert verify_password("new-secret", stored.password_hash)
