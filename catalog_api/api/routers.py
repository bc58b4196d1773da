"""
Основной роутер API.

Подключает все endpoint'ы приложения.
"""

from fastapi import APIRouter

from catalog_api.api.endpoints import admin, auth, banners, categories, plans, posts, public

# Создание основного роутера API
api_router = APIRouter()

# Подключение роутеров для различных ресурсов
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
api_router.include_router(banners.router, prefix="/banners", tags=["banners"])
api_router.include_router(public.router, prefix="/public", tags=["public"])
