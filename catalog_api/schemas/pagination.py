"""
Схемы для пагинации.
"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from catalog_api.core.config import settings


def _positive_int(raw: Optional[str], default: int) -> int:
    # Нечисловые, пустые и неположительные значения -> значение по умолчанию
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


class PageParams(BaseModel):
    """
    Параметры страницы.

    Attributes:
        page: Номер страницы (начиная с 1)
        limit: Размер страницы
    """

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_raw(
        cls,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        default_limit: Optional[int] = None,
        max_limit: Optional[int] = None,
    ) -> "PageParams":
        """
        Разобрать page/limit из строк запроса.

        Отсутствующие или некорректные значения заменяются значениями
        по умолчанию, ошибка не возникает.
        """
        default_limit = default_limit or settings.DEFAULT_PAGE_SIZE
        max_limit = max_limit or settings.MAX_PAGE_SIZE
        return cls(
            page=_positive_int(page, 1),
            limit=min(_positive_int(limit, default_limit), max_limit),
        )


class PageMeta(BaseModel):
    """
    Метаданные пагинации.

    Attributes:
        total: Общее количество записей
        total_pages: Общее количество страниц (0 для пустой выборки)
        current_page: Номер текущей страницы
        limit: Размер страницы
    """

    total: int
    total_pages: int
    current_page: int
    limit: int

    @classmethod
    def create(cls, page: int, limit: int, total: int) -> "PageMeta":
        """Создает экземпляр PageMeta с расчетом total_pages."""
        return cls(
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
            current_page=page,
            limit=limit,
        )

    def as_response(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "limit": self.limit,
        }


class Page(BaseModel):
    """Окно записей и метаданные пагинации."""

    items: List[Dict[str, Any]]
    meta: PageMeta

    def as_response(self) -> Dict[str, Any]:
        """Поля страницы для ответа: data, count, total, totalPages, ..."""
        return {"data": self.items, "count": len(self.items), **self.meta.as_response()}
