"""
Pydantic схемы аутентификации.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from .common import CamelModel


class RegisterRequest(CamelModel):
    """Схема для регистрации пользователя."""

    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(CamelModel):
    """Схема для входа в систему."""

    email: EmailStr = Field(..., description="Email пользователя")
    password: str = Field(..., min_length=6, description="Пароль")


class UserOut(CamelModel):
    """Схема для вывода пользователя."""

    id: str
    username: str
    email: str
    role: Literal["user", "admin"]
    created_at: datetime
    last_login: Optional[datetime] = None
