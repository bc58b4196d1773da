"""
Главный модуль FastAPI приложения Catalog API.

Содержит конфигурацию приложения, middleware и роутеры.
Хранилище изображений создается при старте и доступно через app.state.
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from catalog_api.api.routers import api_router
from catalog_api.core.config import settings
from catalog_api.core.errors import register_exception_handlers
from catalog_api.core.logging import setup_logging
from catalog_api.db.database import engine, init_db
from catalog_api.services.storage_service import build_storage

logger = logging.getLogger(__name__)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Catalog API",
    description="API каталога: категории, объявления, тарифные планы и баннеры",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)

# Подключение статических файлов для локального хранилища
if settings.STORAGE_TYPE == "local":
    uploads_path = os.path.abspath(settings.STORAGE_PATH)
    os.makedirs(uploads_path, exist_ok=True)
    app.mount("/static", StaticFiles(directory=uploads_path), name="static")


# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Catalog API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """
    Событие запуска приложения.

    Настраивает логирование, создает таблицы и провайдер хранилища.
    """
    setup_logging(settings.LOG_LEVEL)
    init_db()
    app.state.storage = build_storage(settings)
    logger.info("Catalog API started (storage: %s)", settings.STORAGE_TYPE)


@app.on_event("shutdown")
async def shutdown_event():
    """
    Событие завершения приложения.

    Закрывает клиент хранилища и пул соединений с БД.
    """
    storage = getattr(app.state, "storage", None)
    if storage is not None:
        storage.close()
    engine.dispose()
