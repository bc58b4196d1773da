"""
Конфигурация базы данных.

Содержит движок SQLAlchemy, фабрику сессий и зависимости FastAPI.
"""

from typing import Generator

from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from catalog_api.core.config import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Создать движок SQLAlchemy.

    Для SQLite отключается проверка потока: параллельные чтения
    выполняются в пуле потоков, каждое в своей сессии.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        pool_pre_ping=True,  # Проверка соединения перед использованием
        future=True,
        echo=echo,
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


# Создание движка SQLAlchemy
engine = build_engine(settings.DATABASE_URL, echo=bool(settings.DEBUG))

# Фабрика сессий базы данных
SessionLocal = build_session_factory(engine)


def init_db(bind: Engine = engine) -> None:
    """Создать все таблицы (если их нет)."""
    from catalog_api.db.models import Base

    Base.metadata.create_all(bind=bind)


def get_session_factory() -> sessionmaker:
    """
    Dependency для получения фабрики сессий.

    Используется там, где независимые чтения выполняются параллельно
    и каждому нужна собственная сессия.
    """
    return SessionLocal


def get_db(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> Generator[Session, None, None]:
    """
    Dependency для получения сессии базы данных.

    Yields:
        Session: Сессия SQLAlchemy

    Note:
        Автоматически закрывает сессию после использования
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
