"""
Pytest configuration and fixtures for catalog API tests.
"""

import os
import tempfile
from decimal import Decimal
from io import BytesIO
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Set up test environment variables before importing anything else
_TMP = tempfile.mkdtemp(prefix="catalog-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP}/unused.db")
os.environ.setdefault("STORAGE_TYPE", "local")
os.environ.setdefault("STORAGE_PATH", os.path.join(_TMP, "uploads"))
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from catalog_api.core.auth import AuthService
from catalog_api.core.errors import StorageError
from catalog_api.db.database import build_engine, build_session_factory, get_session_factory
from catalog_api.db.models import Base, Banner, Category, Plan, Post, User
from catalog_api.db.models.user import ROLE_ADMIN, ROLE_USER
from catalog_api.main import app
from catalog_api.services.storage_service import StorageProvider, get_storage

PASSWORD = "secret123"


class MemoryStorageProvider(StorageProvider):
    """Хранилище в памяти для тестов."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}

    def save_file(self, file_path: str, data: bytes, content_type: Optional[str] = None) -> str:
        self.files[file_path] = data
        return self.get_file_url(file_path)

    def get_file_url(self, file_path: str) -> str:
        return f"https://cdn.test/{file_path}"

    def delete_file(self, file_path: str) -> bool:
        return self.files.pop(file_path, None) is not None


class FailingStorageProvider(MemoryStorageProvider):
    """Хранилище, отклоняющее любую загрузку."""

    def save_file(self, file_path: str, data: bytes, content_type: Optional[str] = None) -> str:
        raise StorageError("bucket unavailable")


@pytest.fixture
def session_factory(tmp_path):
    """Файловая SQLite база на каждый тест."""
    engine = build_engine(f"sqlite:///{tmp_path / 'catalog.db'}")
    Base.metadata.create_all(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def storage():
    return MemoryStorageProvider()


@pytest.fixture
def client(session_factory, storage):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_storage(client):
    """Подменить хранилище приложения на недоступное."""
    broken = FailingStorageProvider()
    app.dependency_overrides[get_storage] = lambda: broken
    return broken


def _make_user(db, username: str, email: str, role: str) -> User:
    user = User(
        username=username,
        email=email,
        hashed_password=AuthService.get_password_hash(PASSWORD),
        role=role,
    )
    db.add(user)
    db.commit()
    return user


def _headers(user: User) -> Dict[str, str]:
    token = AuthService.create_access_token(user.id, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db):
    return _make_user(db, "admin", "admin@example.com", ROLE_ADMIN)


@pytest.fixture
def regular_user(db):
    return _make_user(db, "reader", "reader@example.com", ROLE_USER)


@pytest.fixture
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture
def user_headers(regular_user):
    return _headers(regular_user)


@pytest.fixture
def png_bytes():
    buffer = BytesIO()
    Image.new("RGB", (8, 8), "red").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def image_upload(png_bytes):
    """Поле файла для multipart запроса."""
    return lambda name="image", filename="picture.png": {
        name: (filename, png_bytes, "image/png")
    }


class Seed:
    """Создание записей каталога напрямую через ORM."""

    def __init__(self, db):
        self.db = db

    def category(self, name: str = "Streaming", slug: Optional[str] = None) -> Category:
        category = Category(name=name, slug=slug or name.lower().replace(" ", "-"))
        self.db.add(category)
        self.db.commit()
        return category

    def post(self, category: Category, name: str = "Video service") -> Post:
        post = Post(
            name=name,
            description="A long enough description",
            category_id=category.id,
        )
        self.db.add(post)
        self.db.commit()
        return post

    def plan(self, post: Post, price: str = "19.99", duration: str = "1 month") -> Plan:
        plan = Plan(post_id=post.id, duration=duration, price=Decimal(price), features=["HD"])
        self.db.add(plan)
        self.db.commit()
        return plan

    def banner(self, category: Category, title: str = "Promo") -> Banner:
        banner = Banner(
            title=title,
            image_url="https://cdn.test/banners/promo.png",
            link_type="category",
            linked_category_id=category.id,
        )
        self.db.add(banner)
        self.db.commit()
        return banner


@pytest.fixture
def seed(db):
    return Seed(db)


@pytest.fixture
def user_password():
    """Пароль пользователей, созданных фикстурами."""
    return PASSWORD
