"""
Тесты аутентификации: регистрация, вход, профиль и вход администратора.
"""

from datetime import timedelta

import jwt

from catalog_api.core.auth import AuthService
from catalog_api.core.config import settings


def test_register_creates_regular_user(client):
    response = client.post(
        "/api/auth/register",
        json={
            "username": "newbie",
            "email": "newbie@example.com",
            "password": "hunter22",
            "role": "admin",
        },
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["role"] == "user"
    assert "hashedPassword" not in data["user"]
    payload = jwt.decode(data["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == data["user"]["id"]
    assert payload["role"] == "user"


def test_register_duplicate_email(client, regular_user):
    response = client.post(
        "/api/auth/register",
        json={"username": "someone", "email": regular_user.email, "password": "hunter22"},
    )

    assert response.status_code == 400


def test_register_validates_fields(client):
    response = client.post(
        "/api/auth/register",
        json={"username": "ab", "email": "not-an-email", "password": "123"},
    )

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert {"username", "email", "password"} <= set(errors)


def test_login_and_me(client, regular_user, user_password):
    login = client.post(
        "/api/auth/login", json={"email": regular_user.email, "password": user_password}
    )
    assert login.status_code == 200
    token = login.json()["data"]["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert me.status_code == 200
    profile = me.json()["data"]
    assert profile["id"] == regular_user.id
    assert profile["lastLogin"] is not None


def test_login_with_wrong_password(client, regular_user):
    response = client.post(
        "/api/auth/login", json={"email": regular_user.email, "password": "wrong-one"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_me_without_token(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "No token provided"


def test_me_with_garbage_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_me_with_expired_token(client, regular_user):
    token = AuthService.create_access_token(
        regular_user.id, regular_user.role, expires_delta=timedelta(minutes=-1)
    )

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Token has expired"


def test_token_for_deleted_user(client):
    token = AuthService.create_access_token("ghost", "admin")

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


def test_admin_login(client, admin_user, user_password):
    response = client.post(
        "/api/admin/login", json={"email": admin_user.email, "password": user_password}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["admin"]["role"] == "admin"
    assert AuthService.verify_token(data["token"])["role"] == "admin"


def test_admin_login_rejects_regular_user(client, regular_user, user_password):
    response = client.post(
        "/api/admin/login", json={"email": regular_user.email, "password": user_password}
    )

    assert response.status_code == 403


def test_admin_login_with_bad_credentials(client, admin_user):
    response = client.post(
        "/api/admin/login", json={"email": admin_user.email, "password": "wrong-one"}
    )

    assert response.status_code == 401


def test_password_hashing():
    hashed = AuthService.get_password_hash("admin123")

    assert hashed != "admin123"
    assert AuthService.verify_password("admin123", hashed)
    assert not AuthService.verify_password("admin124", hashed)
