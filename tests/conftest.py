from __future__ import annotations

import os
from pathlib import Path
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("MEDIA_ROOT", str(ROOT_DIR / ".pytest-media"))

import models  # noqa: E402
from models import AdminRole, AdminUser, Category, Product  # noqa: E402
from services.media import MediaStorage  # noqa: E402


@pytest.fixture()
def db_engine(tmp_path: Path):
    db_path = tmp_path / "catalog.sqlite3"
    engine = create_engine(f"sqlite+pysqlite:///{db_path}", future=True)
    models.Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return sessionmaker(
        bind=db_engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@pytest.fixture()
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def storage(tmp_path: Path) -> MediaStorage:
    return MediaStorage(tmp_path / "media")


@pytest.fixture()
def make_category(db_session: Session):
    def _make(name: str, parent: Category | None = None, **fields) -> Category:
        category = Category(
            name=name,
            slug=fields.pop("slug", name.lower().replace(" ", "-")),
            parent_id=parent.id if parent else None,
            **fields,
        )
        db_session.add(category)
        db_session.commit()
        return category

    return _make


@pytest.fixture()
def make_product(db_session: Session):
    def _make(name: str, category: Category, **fields) -> Product:
        product = Product(
            name=name,
            slug=fields.pop("slug", name.lower().replace(" ", "-")),
            description=fields.pop("description", f"{name} description"),
            price=fields.pop("price", 10),
            category_id=category.id,
            **fields,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture()
def make_admin(db_session: Session):
    # Хеш подставной: тестам прав пароль не нужен.
    def _make(email: str, role: AdminRole = AdminRole.admin, is_active: bool = True) -> AdminUser:
        user = AdminUser(
            email=email,
            password_hash="not-a-real-hash",
            name=email.split("@")[0],
            role=role.value,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make
