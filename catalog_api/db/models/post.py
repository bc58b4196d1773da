"""
Модель объявления (поста).
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin


class Post(EntityMixin, Base):
    """
    Модель объявления.

    Ссылка на категорию не является внешним ключом: целостность
    проверяется на уровне приложения.

    Attributes:
        name: Уникальное название
        description: Описание
        category_id: ID категории
        logo_url: URL логотипа (загруженного или внешнего)
        logo_key: Ключ логотипа в хранилище (если загружен)
        category: Связь с категорией (только чтение)
    """

    __tablename__ = "posts"

    name: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    description: Mapped[str] = mapped_column(Text)
    category_id: Mapped[str] = mapped_column(String(32), index=True)
    logo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    category: Mapped[Optional["Category"]] = relationship(
        primaryjoin="foreign(Post.category_id) == Category.id",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Post(id='{self.id}', name='{self.name}')>"
