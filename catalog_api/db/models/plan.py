"""
Модель тарифного плана объявления.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import JSON, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin


class Plan(EntityMixin, Base):
    """
    Модель тарифного плана.

    Attributes:
        post_id: ID объявления
        duration: Метка длительности ("1 month", "1 year")
        price: Цена (не более 2 знаков после запятой)
        features: Упорядоченный список возможностей
        post: Связь с объявлением (только чтение)
    """

    __tablename__ = "plans"

    post_id: Mapped[str] = mapped_column(String(32), index=True)
    duration: Mapped[str] = mapped_column(String(100))
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), index=True)
    features: Mapped[List[str]] = mapped_column(JSON, default=list)

    post: Mapped[Optional["Post"]] = relationship(
        primaryjoin="foreign(Plan.post_id) == Post.id",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Plan(id='{self.id}', post_id='{self.post_id}', price={self.price})>"
