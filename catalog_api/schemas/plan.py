"""
Схемы тарифных планов.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_serializer, field_validator

from .common import CamelModel
from .post import PostRef


def _clean_features(value):
    if value is None:
        return value
    if isinstance(value, str):
        value = [value]
    return [f.strip() if isinstance(f, str) else f for f in value]


class PlanCreate(CamelModel):
    post_id: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    features: List[str] = Field(default_factory=list)

    @field_validator("duration", "post_id", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("features", mode="before")
    @classmethod
    def _features(cls, value):
        return _clean_features(value)

    @field_validator("features")
    @classmethod
    def _feature_length(cls, value: List[str]) -> List[str]:
        for feature in value or []:
            if len(feature) > 200:
                raise ValueError("Feature description cannot exceed 200 characters")
        return value


class PlanUpdate(PlanCreate):
    post_id: Optional[str] = Field(None, min_length=1)
    duration: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    features: Optional[List[str]] = None


class PlanRef(CamelModel):
    """Частичная проекция плана (для баннеров)."""

    id: str
    duration: str
    price: Decimal

    @field_serializer("price")
    def _price(self, value: Decimal) -> float:
        return float(value)


class PlanOut(CamelModel):
    id: str
    post_id: str
    duration: str
    price: Decimal
    features: List[str] = []
    created_at: datetime
    updated_at: datetime

    @field_serializer("price")
    def _price(self, value: Decimal) -> float:
        return float(value)


class PlanWithPost(PlanOut):
    """План с вложенной проекцией объявления и его категории."""

    post: Optional[PostRef] = None

