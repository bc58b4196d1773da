"""
Модель пользователя для системы аутентификации.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, EntityMixin

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(EntityMixin, Base):
    """Модель пользователя."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))

    # Роль задается при создании и не меняется через API
    role: Mapped[str] = mapped_column(String(16), default=ROLE_USER)

    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', email='{self.email}')>"
