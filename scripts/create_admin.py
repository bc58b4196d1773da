#!/usr/bin/env python3
"""
Скрипт для создания администратора в базе данных.

Учетные данные берутся из переменных окружения ADMIN_USERNAME,
ADMIN_EMAIL и ADMIN_PASSWORD. Если администратор уже существует,
ему назначается роль admin и обновляется пароль.
"""

import os
import sys
from pathlib import Path
from typing import Tuple

# Добавляем путь к пакету catalog_api
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_api.core.auth import AuthService
from catalog_api.db.database import SessionLocal, init_db
from catalog_api.db.models.user import ROLE_ADMIN, User


def create_admin(db: Session, username: str, email: str, password: str) -> Tuple[User, bool]:
    """
    Создать администратора или сбросить пароль существующему.

    Returns:
        (пользователь, True если создан новый)
    """
    existing = db.scalar(
        select(User).where(or_(User.username == username, User.email == email))
    )
    hashed_password = AuthService.get_password_hash(password)

    if existing is not None:
        existing.role = ROLE_ADMIN
        existing.hashed_password = hashed_password
        db.commit()
        return existing, False

    admin_user = User(
        username=username,
        email=email,
        hashed_password=hashed_password,
        role=ROLE_ADMIN,
    )
    db.add(admin_user)
    db.commit()
    db.refresh(admin_user)
    return admin_user, True


def main() -> int:
    username = os.getenv("ADMIN_USERNAME", "admin")
    email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    password = os.getenv("ADMIN_PASSWORD", "admin123")

    print("🔑 Создание администратора...")
    print("=" * 50)

    init_db()
    try:
        with SessionLocal() as db:
            user, created = create_admin(db, username, email, password)
    except SQLAlchemyError as e:
        print(f"❌ Ошибка при создании администратора: {e}")
        return 1

    if created:
        print("✅ Администратор создан успешно!")
    else:
        print("✅ Администратор уже существует, пароль обновлен")
    print(f"   Username: {user.username}")
    print(f"   Email: {user.email}")
    print(f"   ID: {user.id}")
    print("=" * 50)
    print("📝 Смените пароль по умолчанию, если он не задан через ADMIN_PASSWORD")
    return 0


if __name__ == "__main__":
    sys.exit(main())
