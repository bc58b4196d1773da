"""
Схемы категорий.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value):
        value = _blank_to_none(value)
        return value.strip() if isinstance(value, str) else value


class CategoryUpdate(CategoryCreate):
    name: Optional[str] = Field(None, min_length=2, max_length=50)


class CategoryRef(CamelModel):
    """Частичная проекция категории для вложения в другие сущности."""

    id: str
    name: str


class CategoryOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    slug: str
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
