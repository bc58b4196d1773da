"""
Схемы баннеров.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from .category import CategoryRef, _blank_to_none
from .common import CamelModel
from .plan import PlanRef

LinkType = Literal["category", "plan"]


class BannerCreate(CamelModel):
    """
    Входные данные баннера.

    Проверяется только форма данных; существование связанной сущности
    и обязательность ссылки проверяет сервис баннеров.
    """

    title: str = Field(..., min_length=3, max_length=100)
    link_type: LinkType
    linked_category_id: Optional[str] = None
    linked_plan_id: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("link_type", mode="before")
    @classmethod
    def _normalize_link_type(cls, value):
        value = _blank_to_none(value)
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("linked_category_id", "linked_plan_id", mode="before")
    @classmethod
    def _blank_ids(cls, value):
        value = _blank_to_none(value)
        return value.strip() if isinstance(value, str) else value


class BannerUpdate(BannerCreate):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    link_type: Optional[LinkType] = None


class BannerOut(CamelModel):
    id: str
    title: str
    image_url: str
    link_type: LinkType
    linked_category_id: Optional[str] = None
    linked_plan_id: Optional[str] = None
    linked_category: Optional[CategoryRef] = None
    linked_plan: Optional[PlanRef] = None
    created_at: datetime
    updated_at: datetime
