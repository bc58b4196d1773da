"""
Публичные эндпоинты витрины (только чтение, без аутентификации).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import sessionmaker

from catalog_api.api.deps import page_params
from catalog_api.db.database import get_session_factory
from catalog_api.schemas.common import success_response
from catalog_api.schemas.pagination import PageParams
from catalog_api.services import feed_service

router = APIRouter()


@router.get("/home")
async def home(
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Данные главной страницы.

    page/limit относятся только к блоку latestPlans.
    """
    data = await feed_service.home_feed(session_factory, params)
    return success_response("Homepage data fetched successfully", data=data)


@router.get("/banners")
async def banners(
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    page = await feed_service.list_banners(session_factory, params)
    return success_response("Banners fetched successfully", **page.as_response())


@router.get("/categories")
async def categories(
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    page = await feed_service.list_categories(session_factory, params)
    return success_response("Categories fetched successfully", **page.as_response())


@router.get("/categories/{category_id}/posts")
async def posts_by_category(
    category_id: str,
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    page = await feed_service.list_posts_by_category(session_factory, category_id, params)
    return success_response("Posts fetched successfully", **page.as_response())


@router.get("/posts")
async def posts(
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    page = await feed_service.list_posts(session_factory, params)
    return success_response("Posts fetched successfully", **page.as_response())


@router.get("/posts/{post_id}")
async def post_detail(
    post_id: str,
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Объявление с категорией и тарифными планами."""
    data = await feed_service.get_post_detail(session_factory, post_id)
    return success_response("Post fetched successfully", data=data)


@router.get("/posts/{post_id}/plans")
async def plans_by_post(
    post_id: str,
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    page = await feed_service.list_plans_by_post(session_factory, post_id, params)
    return success_response("Plans fetched successfully", **page.as_response())
