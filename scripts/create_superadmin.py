"""
CLI-скрипт для создания первого SUPER_ADMIN.

Запуск из корня проекта:
    python -m scripts.create_superadmin --email admin@example.com --password secret123
"""

import argparse

from database import get_session, init_db
from models import AdminRole
from schemas.users import UserPayload
from services import users as users_service
from services.errors import Conflict


def main() -> None:
    parser = argparse.ArgumentParser(description="Создание SUPER_ADMIN для админки каталога")
    parser.add_argument("--email", required=True, help="Email администратора")
    parser.add_argument("--password", required=True, help="Пароль (не короче 6 символов)")
    parser.add_argument("--name", default="Admin User", help="Отображаемое имя")
    args = parser.parse_args()

    init_db()

    payload = UserPayload(
        email=args.email,
        password=args.password,
        name=args.name,
        role=AdminRole.super_admin,
        is_active=True,
    )

    with get_session() as db:
        try:
            user = users_service.create_user(db, payload)
        except Conflict:
            print(f"Пользователь {payload.email} уже существует.")
            return
    print(f"Создан SUPER_ADMIN: {user['email']} (id={user['id']})")


if __name__ == "__main__":
    main()
