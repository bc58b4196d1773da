"""
Сервис объявлений.

Объявление можно создать или перенести только в существующую категорию.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import UploadFile
from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, selectinload

from catalog_api.core.errors import NotFoundError, ValidationError
from catalog_api.db.models import Category, Plan, Post
from catalog_api.schemas.common import dump
from catalog_api.schemas.plan import PlanOut
from catalog_api.schemas.post import PostCreate, PostOut, PostUpdate
from catalog_api.services.image_service import StoredImage, image_service
from catalog_api.services.storage_service import StorageProvider

logger = logging.getLogger(__name__)

NAME_TAKEN = {"name": "Post with this name already exists"}


def serialize(post: Post) -> Dict[str, Any]:
    return dump(PostOut, post)


def list_statement(category_id: Optional[str] = None) -> Select:
    """Объявления от новых к старым, с проекцией категории."""
    stmt = select(Post).options(selectinload(Post.category))
    if category_id is not None:
        stmt = stmt.where(Post.category_id == category_id)
    return stmt.order_by(Post.created_at.desc(), Post.id.desc())


def count_statement(category_id: Optional[str] = None) -> Select:
    stmt = select(func.count()).select_from(Post)
    if category_id is not None:
        stmt = stmt.where(Post.category_id == category_id)
    return stmt


def get_post(db: Session, post_id: str) -> Post:
    post = db.scalar(
        select(Post).options(selectinload(Post.category)).where(Post.id == post_id)
    )
    if post is None:
        raise NotFoundError("Post not found")
    return post


def get_post_detail(db: Session, post_id: str) -> Dict[str, Any]:
    """Объявление с категорией и всеми планами (по возрастанию цены)."""
    post = get_post(db, post_id)
    plans = db.scalars(
        select(Plan).where(Plan.post_id == post.id).order_by(Plan.price.asc())
    ).all()
    body = dump(PostOut, post)
    body["plans"] = [dump(PlanOut, plan) for plan in plans]
    return body


def _ensure_category(db: Session, category_id: str) -> None:
    if db.get(Category, category_id) is None:
        raise NotFoundError("Category not found")


def _ensure_name_free(db: Session, name: str, exclude_id: Optional[str] = None) -> None:
    stmt = select(Post.id).where(Post.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Post.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise ValidationError(NAME_TAKEN["name"], errors=NAME_TAKEN)


def _store_logo(storage: StorageProvider, logo: UploadFile) -> StoredImage:
    return image_service.store(
        storage, logo, "posts", field="logo",
        failure_message="Failed to upload post logo",
    )


def create_post(
    db: Session,
    storage: StorageProvider,
    data: PostCreate,
    logo: Optional[UploadFile] = None,
) -> Post:
    _ensure_category(db, data.category_id)
    _ensure_name_free(db, data.name)

    stored = _store_logo(storage, logo) if logo is not None else None
    post = Post(
        name=data.name,
        description=data.description,
        category_id=data.category_id,
        logo_url=stored.url if stored else data.logo_url,
        logo_key=stored.key if stored else None,
    )
    db.add(post)
    image_service.commit_or_discard(db, storage, stored, conflict=NAME_TAKEN)

    logger.info("Post created: %s in category %s", post.id, post.category_id)
    return get_post(db, post.id)


def update_post(
    db: Session,
    storage: StorageProvider,
    post_id: str,
    data: PostUpdate,
    logo: Optional[UploadFile] = None,
) -> Post:
    post = get_post(db, post_id)
    fields = data.model_dump(exclude_unset=True)

    if fields.get("category_id") and fields["category_id"] != post.category_id:
        _ensure_category(db, fields["category_id"])
        post.category_id = fields["category_id"]
    if fields.get("name") and fields["name"] != post.name:
        _ensure_name_free(db, fields["name"], exclude_id=post.id)
        post.name = fields["name"]
    if fields.get("description"):
        post.description = fields["description"]

    stored = None
    old_key = None
    if logo is not None:
        stored = _store_logo(storage, logo)
        old_key = post.logo_key
        post.logo_url, post.logo_key = stored.url, stored.key
    elif fields.get("logo_url"):
        old_key = post.logo_key
        post.logo_url, post.logo_key = fields["logo_url"], None

    image_service.commit_or_discard(db, storage, stored, conflict=NAME_TAKEN)
    image_service.discard(storage, old_key)
    db.expire(post)
    return get_post(db, post_id)


def delete_post(db: Session, storage: StorageProvider, post_id: str) -> None:
    """
    Удалить объявление.

    Raises:
        NotFoundError: Объявление не найдено
        ValidationError: У объявления есть тарифные планы
    """
    post = get_post(db, post_id)
    plans = db.scalar(
        select(func.count()).select_from(Plan).where(Plan.post_id == post.id)
    )
    if plans:
        raise ValidationError(f"Post has {plans} plan(s); delete them first")

    logo_key = post.logo_key
    db.delete(post)
    db.commit()
    image_service.discard(storage, logo_key)
    logger.info("Post deleted: %s", post_id)
