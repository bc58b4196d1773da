"""
API эндпоинты для административной панели.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_api.core.auth import auth_service
from catalog_api.core.errors import AuthError, ForbiddenError
from catalog_api.db.database import get_db
from catalog_api.db.models.user import User
from catalog_api.schemas.auth import LoginRequest, UserOut
from catalog_api.schemas.common import dump, success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login")
def admin_login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """
    Вход в административную панель.

    Args:
        login_data: Данные для входа (email, password)
        db: Сессия базы данных

    Returns:
        JWT токен и информация об администраторе

    Raises:
        AuthError: При неверных учетных данных
        ForbiddenError: Если пользователь не администратор
    """
    user = db.scalar(select(User).where(User.email == login_data.email))

    if not user or not auth_service.verify_password(
        login_data.password, user.hashed_password
    ):
        logger.info("Admin login failed for %s", login_data.email)
        raise AuthError("Invalid credentials")

    if not user.is_admin:
        logger.warning("Non-admin user %s tried to log into admin panel", user.id)
        raise ForbiddenError("Access denied. Admin privileges required.")

    # Обновляем время последнего входа
    user.last_login = datetime.utcnow()
    db.commit()

    access_token = auth_service.create_access_token(user.id, user.role)
    return success_response(
        "Admin login successful",
        data={"token": access_token, "admin": dump(UserOut, user)},
    )
