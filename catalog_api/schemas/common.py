"""
Общие схемы и формат ответа API.

Все ответы имеют вид:
{"success": bool, "message": str, "data": ..., "errors": {field: message}}
"""

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from catalog_api.core.errors import validation_error_from

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Базовая схема: поля в snake_case, JSON в camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def dump(schema: Type[BaseModel], obj: Any) -> Dict[str, Any]:
    """Сериализовать ORM объект через схему в JSON-совместимый dict."""
    return schema.model_validate(obj).model_dump(by_alias=True, mode="json")


def parse(schema: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """
    Провалидировать входные данные (например, поля multipart формы).

    Raises:
        ValidationError: с ошибками по полям
    """
    # None = поле не передано (пустое поле формы)
    data = {key: value for key, value in data.items() if value is not None}
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise validation_error_from(exc) from exc


def success_response(
    message: str, data: Any = None, **others: Any
) -> Dict[str, Any]:
    """Сформировать успешный ответ в едином формате."""
    body: Dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    body.update(others)
    return body
