"""
Сервис категорий: slug, CRUD и правила удаления.
"""

import logging
import re
import unicodedata
from typing import Any, Dict, Optional

from fastapi import UploadFile
from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from catalog_api.core.errors import NotFoundError, ValidationError
from catalog_api.db.models import Banner, Category, Post
from catalog_api.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from catalog_api.schemas.common import dump
from catalog_api.services.image_service import image_service
from catalog_api.services.storage_service import StorageProvider

logger = logging.getLogger(__name__)

NAME_TAKEN = {"name": "Category with this name already exists"}


def slugify(name: str) -> str:
    """Создать URL-safe slug из названия."""
    # Диакритика -> ASCII: "Café" -> "cafe"
    slug = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode()
    slug = slug.lower().strip()
    # Убираем все, кроме латиницы, цифр, пробелов и дефисов
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"[\s-]+", "-", slug)
    return slug.strip("-")


def unique_slug(db: Session, name: str, exclude_id: Optional[str] = None) -> str:
    """Slug из названия с числовым суффиксом при совпадении."""
    base_slug = slugify(name) or "category"
    slug = base_slug
    counter = 1
    while True:
        stmt = select(Category.id).where(Category.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        if db.scalar(stmt) is None:
            return slug
        counter += 1
        slug = f"{base_slug}-{counter}"


def serialize(category: Category) -> Dict[str, Any]:
    return dump(CategoryOut, category)


def list_statement() -> Select:
    return select(Category).order_by(Category.name.asc())


def count_statement() -> Select:
    return select(func.count()).select_from(Category)


def get_category(db: Session, category_id: str) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _ensure_name_free(db: Session, name: str, exclude_id: Optional[str] = None) -> None:
    stmt = select(Category.id).where(Category.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise ValidationError(NAME_TAKEN["name"], errors=NAME_TAKEN)


def create_category(
    db: Session,
    storage: StorageProvider,
    data: CategoryCreate,
    image: Optional[UploadFile] = None,
) -> Category:
    _ensure_name_free(db, data.name)

    stored = None
    if image is not None:
        stored = image_service.store(
            storage, image, "categories",
            failure_message="Failed to upload category image",
        )

    category = Category(
        name=data.name,
        description=data.description,
        slug=unique_slug(db, data.name),
        image_url=stored.url if stored else None,
        image_key=stored.key if stored else None,
    )
    db.add(category)
    image_service.commit_or_discard(db, storage, stored, conflict=NAME_TAKEN)
    db.refresh(category)

    logger.info("Category created: %s (%s)", category.id, category.slug)
    return category


def update_category(
    db: Session,
    storage: StorageProvider,
    category_id: str,
    data: CategoryUpdate,
    image: Optional[UploadFile] = None,
) -> Category:
    category = get_category(db, category_id)

    fields = data.model_dump(exclude_unset=True)
    if fields.get("name") and fields["name"] != category.name:
        _ensure_name_free(db, fields["name"], exclude_id=category.id)
        category.name = fields["name"]
        # Slug пересчитывается при каждом переименовании
        category.slug = unique_slug(db, category.name, exclude_id=category.id)
    if "description" in fields:
        category.description = fields["description"]

    stored = None
    old_key = None
    if image is not None:
        stored = image_service.store(
            storage, image, "categories",
            failure_message="Failed to upload category image",
        )
        old_key = category.image_key
        category.image_url = stored.url
        category.image_key = stored.key

    image_service.commit_or_discard(db, storage, stored, conflict=NAME_TAKEN)
    image_service.discard(storage, old_key)
    db.refresh(category)
    return category


def delete_category(db: Session, storage: StorageProvider, category_id: str) -> None:
    """
    Удалить категорию.

    Raises:
        NotFoundError: Категория не найдена
        ValidationError: На категорию ссылаются объявления или баннеры
    """
    category = get_category(db, category_id)

    posts = db.scalar(
        select(func.count()).select_from(Post).where(Post.category_id == category.id)
    )
    if posts:
        raise ValidationError(
            f"Category has {posts} post(s); delete or move them first"
        )
    banners = db.scalar(
        select(func.count())
        .select_from(Banner)
        .where(Banner.linked_category_id == category.id)
    )
    if banners:
        raise ValidationError(
            f"Category is linked from {banners} banner(s); update or delete them first"
        )

    image_key = category.image_key
    db.delete(category)
    db.commit()
    image_service.discard(storage, image_key)
    logger.info("Category deleted: %s", category_id)
