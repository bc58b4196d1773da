"""
Общие зависимости эндпоинтов.
"""

from typing import Optional

from fastapi import Query, UploadFile

from catalog_api.schemas.pagination import PageParams


def page_params(
    page: Optional[str] = Query(None, description="Номер страницы (по умолчанию 1)"),
    limit: Optional[str] = Query(None, description="Размер страницы (по умолчанию 10)"),
) -> PageParams:
    """
    Параметры пагинации из строки запроса.

    Принимаются как строки: нечисловые значения не дают ошибку 400,
    а заменяются значениями по умолчанию.
    """
    return PageParams.from_raw(page, limit)


def uploaded(file: Optional[UploadFile]) -> Optional[UploadFile]:
    """Пустое поле файла в multipart форме считается отсутствующим."""
    if file is None or not file.filename:
        return None
    return file
