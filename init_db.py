#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных
"""

import sys
from pathlib import Path

# Добавляем путь к пакету catalog_api
sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from catalog_api.db.database import engine, init_db


def init_database() -> bool:
    """Создает все таблицы в базе данных."""
    print("🗄️ Инициализация базы данных...")

    try:
        init_db(engine)
    except SQLAlchemyError as e:
        print(f"❌ Ошибка создания таблиц: {e}")
        return False

    print("✅ Все таблицы созданы успешно!")
    tables = inspect(engine).get_table_names()
    print(f"📋 Таблиц в базе: {len(tables)}")
    for table in tables:
        print(f"  - {table}")
    return True


if __name__ == "__main__":
    if not init_database():
        sys.exit(1)
