"""
Ошибки приложения и их преобразование в HTTP ответы.

Все ответы об ошибках имеют единый формат:
{"success": false, "message": "...", "errors": {"field": "message"}}
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Базовая ошибка приложения с HTTP статусом."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    """Некорректные входные данные или нарушение бизнес-правила."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class NotFoundError(AppError):
    """Запрошенная или связанная сущность не существует."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class AuthError(AppError):
    """Отсутствующий, неверный или просроченный токен."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class ForbiddenError(AppError):
    """Пользователь аутентифицирован, но не имеет нужной роли."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to access this route"


class StorageError(AppError):
    """Ошибка загрузки файла в хранилище."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to upload file"


def _loc_to_field(loc) -> str:
    # ("body", "linkType") -> "linkType"; ("query", "page") -> "page"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "form")]
    return ".".join(parts) or "__root__"


def errors_from_pydantic(exc: PydanticValidationError) -> Dict[str, str]:
    """Собрать ошибки pydantic в словарь {поле: сообщение}."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        field = _loc_to_field(err.get("loc", ()))
        errors.setdefault(field, err.get("msg", "Invalid value"))
    return errors


def validation_error_from(exc: PydanticValidationError) -> ValidationError:
    errors = errors_from_pydantic(exc)
    return ValidationError(next(iter(errors.values()), None), errors=errors)


def _error_body(message: str, errors: Optional[Dict[str, str]] = None) -> dict:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = None
    if isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.errors),
        headers=headers,
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        errors.setdefault(_loc_to_field(err.get("loc", ())), err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(next(iter(errors.values()), "Validation failed"), errors),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Подключить обработчики ошибок к приложению."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
