"""
Схемы объявлений.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .category import CategoryRef, _blank_to_none
from .common import CamelModel

URL_PATTERN = r"^https?://.+"


class PostCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10, max_length=2000)
    category_id: str = Field(..., min_length=1)
    logo_url: Optional[str] = Field(
        None, pattern=URL_PATTERN, description="Внешний URL логотипа"
    )

    @field_validator("name", "description", "category_id", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("logo_url", mode="before")
    @classmethod
    def _blank_logo(cls, value):
        value = _blank_to_none(value)
        return value.strip() if isinstance(value, str) else value


class PostUpdate(PostCreate):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=2000)
    category_id: Optional[str] = Field(None, min_length=1)

    @field_validator("category_id", mode="before")
    @classmethod
    def _blank_category(cls, value):
        return _blank_to_none(value)


class PostRef(CamelModel):
    """Проекция объявления для вложения в план."""

    id: str
    name: str
    description: str
    logo_url: Optional[str] = None
    category: Optional[CategoryRef] = None


class PostOut(CamelModel):
    id: str
    name: str
    description: str
    category_id: str
    category: Optional[CategoryRef] = None
    logo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
