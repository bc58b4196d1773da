"""
Тесты скрипта создания администратора.
"""

from catalog_api.core.auth import AuthService
from catalog_api.db.models.user import ROLE_ADMIN
from scripts.create_admin import create_admin


def test_create_admin_creates_user(db):
    user, created = create_admin(db, "root", "root@example.com", "admin123")

    assert created
    assert user.role == ROLE_ADMIN
    assert AuthService.verify_password("admin123", user.hashed_password)


def test_create_admin_promotes_existing_user(db, regular_user):
    user, created = create_admin(db, "someone", regular_user.email, "newpass1")

    assert not created
    assert user.id == regular_user.id
    assert user.is_admin
    assert AuthService.verify_password("newpass1", user.hashed_password)
