"""
API эндпоинты регистрации и входа пользователей.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from catalog_api.core.auth import auth_service, get_current_user
from catalog_api.core.errors import AuthError, ValidationError
from catalog_api.db.database import get_db
from catalog_api.db.models.user import ROLE_USER, User
from catalog_api.schemas.auth import LoginRequest, RegisterRequest, UserOut
from catalog_api.schemas.common import dump, success_response

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """
    Регистрация нового пользователя.

    Роль всегда user: назначить администратора через API нельзя.
    """
    existing_user = db.scalar(
        select(User).where(or_(User.email == body.email, User.username == body.username))
    )
    if existing_user:
        raise ValidationError("User with this email or username already exists")

    user = User(
        username=body.username,
        email=body.email,
        hashed_password=auth_service.get_password_hash(body.password),
        role=ROLE_USER,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    token = auth_service.create_access_token(user.id, user.role)
    return success_response(
        "User registered successfully",
        data={"user": dump(UserOut, user), "token": token},
    )


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """
    Вход пользователя по email и паролю.

    Raises:
        AuthError: При неверных учетных данных
    """
    user = db.scalar(select(User).where(User.email == body.email))
    if not user or not auth_service.verify_password(body.password, user.hashed_password):
        raise AuthError("Invalid credentials")

    user.last_login = datetime.utcnow()
    db.commit()

    token = auth_service.create_access_token(user.id, user.role)
    return success_response(
        "Login successful", data={"user": dump(UserOut, user), "token": token}
    )


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    """Получить профиль текущего пользователя."""
    return success_response("User fetched successfully", data=dump(UserOut, current_user))
