"""
Модель категории объявлений.
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, EntityMixin


class Category(EntityMixin, Base):
    """
    Модель категории.

    Attributes:
        name: Уникальное название категории
        description: Описание
        slug: URL-friendly название (генерируется из name)
        image_url: Публичный URL изображения
        image_key: Ключ изображения в хранилище
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slug: Mapped[str] = mapped_column(String(80), unique=True, index=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Category(id='{self.id}', slug='{self.slug}')>"
