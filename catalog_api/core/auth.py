"""
Модуль аутентификации и авторизации.

Содержит функции для работы с JWT токенами, хеширования паролей
и проверки прав доступа пользователей.
"""

from datetime import datetime, timedelta
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from catalog_api.core.config import settings
from catalog_api.core.errors import AuthError, ForbiddenError
from catalog_api.db.database import get_db
from catalog_api.db.models.user import ROLE_ADMIN, User

# Настройка хеширования паролей
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

# HTTP Bearer схема (ошибку отсутствия токена формируем сами -> 401)
security = HTTPBearer(auto_error=False)


class AuthService:
    """Сервис для работы с аутентификацией."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Проверка пароля."""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Хеширование пароля."""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(
        subject: str, role: str, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Создание JWT токена с id пользователя и ролью."""
        if expires_delta is None:
            minutes = (
                settings.ADMIN_TOKEN_EXPIRE_MINUTES
                if role == ROLE_ADMIN
                else settings.ACCESS_TOKEN_EXPIRE_MINUTES
            )
            expires_delta = timedelta(minutes=minutes)

        to_encode = {
            "sub": str(subject),
            "role": role,
            "exp": datetime.utcnow() + expires_delta,
        }
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> dict:
        """
        Проверка JWT токена.

        Raises:
            AuthError: Если токен просрочен или недействителен
        """
        try:
            payload = jwt.decode(
                token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
            )
        except jwt.ExpiredSignatureError:
            raise AuthError("Token has expired")
        except jwt.PyJWTError:
            raise AuthError("Invalid token")

        if not payload.get("sub") or not payload.get("role"):
            raise AuthError("Invalid token")
        return payload


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Получение текущего пользователя из токена."""
    if credentials is None or not credentials.credentials:
        raise AuthError("No token provided")

    payload = AuthService.verify_token(credentials.credentials)

    user = db.get(User, payload["sub"])
    if user is None:
        raise AuthError("User not found")

    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Проверка прав администратора."""
    if not current_user.is_admin:
        raise ForbiddenError("Not authorized to access this route")
    return current_user


# Экспорт сервиса
auth_service = AuthService()
