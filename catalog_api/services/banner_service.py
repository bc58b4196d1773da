"""
Сервис баннеров.

Баннер ссылается либо на категорию, либо на тарифный план. Тип ссылки
(link_type) определяет, какое поле-ссылка является основным:
- ссылка соответствующего типа обязательна и должна указывать
  на существующую сущность;
- ссылка другого типа всегда очищается перед записью.

На чтении ссылка разворачивается в частичную проекцию:
категория -> {id, name}, план -> {id, duration, price}.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import UploadFile
from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, selectinload

from catalog_api.core.errors import NotFoundError, ValidationError
from catalog_api.db.models import Banner, Category, Plan
from catalog_api.db.models.banner import LINK_CATEGORY, LINK_PLAN, normalize_banner_links
from catalog_api.schemas.banner import BannerCreate, BannerOut, BannerUpdate
from catalog_api.schemas.common import dump
from catalog_api.services.image_service import image_service
from catalog_api.services.storage_service import StorageProvider

logger = logging.getLogger(__name__)

UPLOAD_FAILED = "Failed to upload banner image"


@dataclass(frozen=True)
class ResolvedLink:
    """Проверенная ссылка баннера: тип и ровно один ID."""

    link_type: str
    linked_category_id: Optional[str]
    linked_plan_id: Optional[str]


def resolve_link(
    db: Session,
    link_type: str,
    linked_category_id: Optional[str],
    linked_plan_id: Optional[str],
) -> ResolvedLink:
    """
    Проверить ссылку баннера и оставить только поле, соответствующее типу.

    Args:
        db: Сессия базы данных
        link_type: category или plan
        linked_category_id: ID категории (используется при link_type=category)
        linked_plan_id: ID плана (используется при link_type=plan)

    Returns:
        ResolvedLink: Ссылка с одним заполненным ID

    Raises:
        ValidationError: Неизвестный тип или не указан ID нужного типа
        NotFoundError: Связанная сущность не существует
    """
    if link_type == LINK_CATEGORY:
        if not linked_category_id:
            message = 'Category ID is required when link type is "category"'
            raise ValidationError(message, errors={"linkedCategoryId": message})
        if db.get(Category, linked_category_id) is None:
            raise NotFoundError("Linked category not found")
        return ResolvedLink(LINK_CATEGORY, linked_category_id, None)

    if link_type == LINK_PLAN:
        if not linked_plan_id:
            message = 'Plan ID is required when link type is "plan"'
            raise ValidationError(message, errors={"linkedPlanId": message})
        if db.get(Plan, linked_plan_id) is None:
            raise NotFoundError("Linked plan not found")
        return ResolvedLink(LINK_PLAN, None, linked_plan_id)

    message = 'Link type must be either "category" or "plan"'
    raise ValidationError(message, errors={"linkType": message})


def _apply_link(banner: Banner, link: ResolvedLink) -> None:
    banner.link_type = link.link_type
    banner.linked_category_id = link.linked_category_id
    banner.linked_plan_id = link.linked_plan_id
    normalize_banner_links(banner)


def serialize(banner: Banner) -> Dict[str, Any]:
    return dump(BannerOut, banner)


def list_statement() -> Select:
    return (
        select(Banner)
        .options(selectinload(Banner.linked_category), selectinload(Banner.linked_plan))
        .order_by(Banner.created_at.desc(), Banner.id.desc())
    )


def count_statement() -> Select:
    return select(func.count()).select_from(Banner)


def get_banner(db: Session, banner_id: str) -> Banner:
    banner = db.scalar(list_statement().where(Banner.id == banner_id))
    if banner is None:
        raise NotFoundError("Banner not found")
    return banner


def create_banner(
    db: Session,
    storage: StorageProvider,
    data: BannerCreate,
    image: Optional[UploadFile],
) -> Banner:
    """
    Создать баннер.

    Порядок: проверка ссылки -> проверка и загрузка изображения -> запись.
    Если запись не удалась, загруженное изображение удаляется.
    """
    link = resolve_link(db, data.link_type, data.linked_category_id, data.linked_plan_id)

    if image is None:
        raise ValidationError(
            "Banner image is required", errors={"image": "Banner image is required"}
        )
    stored = image_service.store(storage, image, "banners", failure_message=UPLOAD_FAILED)

    banner = Banner(title=data.title, image_url=stored.url, image_key=stored.key)
    _apply_link(banner, link)
    db.add(banner)
    image_service.commit_or_discard(db, storage, stored)

    logger.info("Banner created: %s -> %s", banner.id, banner.link_type)
    return get_banner(db, banner.id)


def update_banner(
    db: Session,
    storage: StorageProvider,
    banner_id: str,
    data: BannerUpdate,
    image: Optional[UploadFile] = None,
) -> Banner:
    """
    Обновить баннер (частично).

    Не переданные поля сохраняют текущие значения. При смене link_type
    ссылка старого типа не переносится: ID нового типа должен быть
    передан в запросе.
    """
    banner = get_banner(db, banner_id)
    fields = data.model_dump(exclude_unset=True)

    link_type = fields.get("link_type") or banner.link_type
    category_id = fields.get("linked_category_id")
    plan_id = fields.get("linked_plan_id")
    if link_type == banner.link_type:
        category_id = category_id or banner.linked_category_id
        plan_id = plan_id or banner.linked_plan_id
    link = resolve_link(db, link_type, category_id, plan_id)

    stored = None
    old_key = None
    if image is not None:
        stored = image_service.store(
            storage, image, "banners", failure_message=UPLOAD_FAILED
        )
        old_key = banner.image_key
        banner.image_url, banner.image_key = stored.url, stored.key

    if fields.get("title"):
        banner.title = fields["title"]
    _apply_link(banner, link)

    image_service.commit_or_discard(db, storage, stored)
    image_service.discard(storage, old_key)
    db.expire(banner)
    return get_banner(db, banner_id)


def delete_banner(db: Session, storage: StorageProvider, banner_id: str) -> None:
    banner = get_banner(db, banner_id)
    image_key = banner.image_key
    db.delete(banner)
    db.commit()
    image_service.discard(storage, image_key)
    logger.info("Banner deleted: %s", banner_id)
