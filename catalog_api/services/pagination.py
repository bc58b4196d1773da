"""
Пагинация и параллельное выполнение независимых чтений.

Окно записей и общее количество читаются одновременно, каждое
в собственной сессии в пуле потоков; результаты ожидаются совместно.
Ошибка любого чтения приводит к ошибке всего запроса.
"""

import asyncio
from typing import Any, Callable, Dict, List

from sqlalchemy import Select
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from catalog_api.schemas.pagination import Page, PageMeta, PageParams

Reader = Callable[[Session], Any]
Serializer = Callable[[Any], Dict[str, Any]]


def _in_session(session_factory: sessionmaker, reader: Reader) -> Any:
    with session_factory() as db:
        return reader(db)


async def run_concurrently(session_factory: sessionmaker, *readers: Reader) -> List[Any]:
    """
    Выполнить независимые чтения параллельно.

    Args:
        session_factory: Фабрика сессий (каждому чтению своя сессия)
        readers: Функции вида reader(db) -> результат

    Returns:
        List: Результаты в порядке передачи readers
    """
    results = await asyncio.gather(
        *(run_in_threadpool(_in_session, session_factory, reader) for reader in readers)
    )
    return list(results)


def window_reader(
    stmt: Select, params: PageParams, serialize: Serializer
) -> Reader:
    """Чтение одной страницы; сериализация выполняется внутри сессии."""

    def read(db: Session) -> List[Dict[str, Any]]:
        rows = db.scalars(stmt.offset(params.offset).limit(params.limit)).all()
        return [serialize(row) for row in rows]

    return read


def list_reader(stmt: Select, serialize: Serializer) -> Reader:
    """Чтение всей выборки без пагинации."""

    def read(db: Session) -> List[Dict[str, Any]]:
        return [serialize(row) for row in db.scalars(stmt).all()]

    return read


def count_reader(count_stmt: Select) -> Reader:
    def read(db: Session) -> int:
        return db.scalar(count_stmt) or 0

    return read


def make_page(items: List[Dict[str, Any]], total: int, params: PageParams) -> Page:
    return Page(items=items, meta=PageMeta.create(params.page, params.limit, total))


async def paginate(
    session_factory: sessionmaker,
    stmt: Select,
    count_stmt: Select,
    params: PageParams,
    serialize: Serializer,
) -> Page:
    """
    Получить страницу записей и общее количество.

    Args:
        session_factory: Фабрика сессий
        stmt: Запрос с сортировкой (без offset/limit)
        count_stmt: Запрос количества записей
        params: Номер и размер страницы
        serialize: Преобразование ORM объекта в dict ответа

    Returns:
        Page: Записи страницы и метаданные
    """
    items, total = await run_concurrently(
        session_factory,
        window_reader(stmt, params, serialize),
        count_reader(count_stmt),
    )
    return make_page(items, total, params)
