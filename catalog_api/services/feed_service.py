"""
Публичная витрина: списки с пагинацией и данные главной страницы.

Все независимые чтения выполняются параллельно (см. pagination.py).
Списки, отфильтрованные по родителю (объявления категории, планы
объявления), сначала проверяют существование родителя: отсутствующий
родитель -> 404, существующий без записей -> пустой список.
"""

from typing import Any, Dict

from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from catalog_api.core.errors import NotFoundError
from catalog_api.db.models import Category, Post
from catalog_api.schemas.pagination import Page, PageParams
from catalog_api.services import (
    banner_service,
    category_service,
    plan_service,
    post_service,
)
from catalog_api.services.pagination import (
    count_reader,
    list_reader,
    make_page,
    paginate,
    run_concurrently,
    window_reader,
)


def _exists(session_factory: sessionmaker, model, entity_id: str) -> bool:
    with session_factory() as db:
        return db.get(model, entity_id) is not None


async def list_banners(session_factory: sessionmaker, params: PageParams) -> Page:
    return await paginate(
        session_factory,
        banner_service.list_statement(),
        banner_service.count_statement(),
        params,
        banner_service.serialize,
    )


async def list_categories(session_factory: sessionmaker, params: PageParams) -> Page:
    return await paginate(
        session_factory,
        category_service.list_statement(),
        category_service.count_statement(),
        params,
        category_service.serialize,
    )


async def list_posts(session_factory: sessionmaker, params: PageParams) -> Page:
    return await paginate(
        session_factory,
        post_service.list_statement(),
        post_service.count_statement(),
        params,
        post_service.serialize,
    )


async def list_plans(session_factory: sessionmaker, params: PageParams) -> Page:
    return await paginate(
        session_factory,
        plan_service.list_statement(),
        plan_service.count_statement(),
        params,
        plan_service.serialize,
    )


async def list_posts_by_category(
    session_factory: sessionmaker, category_id: str, params: PageParams
) -> Page:
    """
    Объявления категории.

    Raises:
        NotFoundError: Категория не существует (списки не запрашиваются)
    """
    if not await run_in_threadpool(_exists, session_factory, Category, category_id):
        raise NotFoundError("Category not found")

    return await paginate(
        session_factory,
        post_service.list_statement(category_id=category_id),
        post_service.count_statement(category_id=category_id),
        params,
        post_service.serialize,
    )


async def list_plans_by_post(
    session_factory: sessionmaker, post_id: str, params: PageParams
) -> Page:
    """
    Тарифные планы объявления (по возрастанию цены).

    Raises:
        NotFoundError: Объявление не существует (списки не запрашиваются)
    """
    if not await run_in_threadpool(_exists, session_factory, Post, post_id):
        raise NotFoundError("Post not found")

    return await paginate(
        session_factory,
        plan_service.list_statement(post_id=post_id),
        plan_service.count_statement(post_id=post_id),
        params,
        plan_service.serialize,
    )


def _read_post_detail(session_factory: sessionmaker, post_id: str) -> Dict[str, Any]:
    with session_factory() as db:
        return post_service.get_post_detail(db, post_id)


async def get_post_detail(session_factory: sessionmaker, post_id: str) -> Dict[str, Any]:
    """Объявление с категорией и планами; одно чтение в пуле потоков."""
    return await run_in_threadpool(_read_post_detail, session_factory, post_id)


async def home_feed(session_factory: sessionmaker, params: PageParams) -> Dict[str, Any]:
    """
    Данные главной страницы.

    Три независимых блока: все баннеры, все категории (по имени) и
    страница последних планов. Ошибка любого чтения -> ошибка всего ответа.
    """
    banners, categories, latest_plans, total_plans = await run_concurrently(
        session_factory,
        list_reader(banner_service.list_statement(), banner_service.serialize),
        list_reader(category_service.list_statement(), category_service.serialize),
        window_reader(
            plan_service.list_statement(order="latest"), params, plan_service.serialize
        ),
        count_reader(plan_service.count_statement()),
    )

    plans_page = make_page(latest_plans, total_plans, params)
    return {
        "banners": {"count": len(banners), "data": banners},
        "categories": {"count": len(categories), "data": categories},
        "latestPlans": plans_page.as_response(),
    }
