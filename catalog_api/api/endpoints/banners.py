"""
API эндпоинты управления баннерами (только для администраторов).
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session, sessionmaker

from catalog_api.api.deps import page_params, uploaded
from catalog_api.core.auth import require_admin
from catalog_api.db.database import get_db, get_session_factory
from catalog_api.schemas.banner import BannerCreate, BannerUpdate
from catalog_api.schemas.common import parse, success_response
from catalog_api.schemas.pagination import PageParams
from catalog_api.services import banner_service, feed_service
from catalog_api.services.storage_service import StorageProvider, get_storage

router = APIRouter(dependencies=[Depends(require_admin)])


def _form(title, link_type, linked_category_id, linked_plan_id) -> dict:
    return {
        "title": title,
        "linkType": link_type,
        "linkedCategoryId": linked_category_id,
        "linkedPlanId": linked_plan_id,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_banner(
    title: Optional[str] = Form(None),
    link_type: Optional[str] = Form(None, alias="linkType"),
    linked_category_id: Optional[str] = Form(None, alias="linkedCategoryId"),
    linked_plan_id: Optional[str] = Form(None, alias="linkedPlanId"),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    """
    Создать баннер.

    Multipart форма: title, linkType (category/plan), linkedCategoryId
    или linkedPlanId и обязательное изображение в поле image.
    """
    data = parse(
        BannerCreate, _form(title, link_type, linked_category_id, linked_plan_id)
    )
    banner = banner_service.create_banner(db, storage, data, uploaded(image))
    return success_response(
        "Banner created successfully", data=banner_service.serialize(banner)
    )


@router.get("")
async def list_banners(
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    page = await feed_service.list_banners(session_factory, params)
    return success_response("Banners fetched successfully", **page.as_response())


@router.get("/{banner_id}")
def get_banner(banner_id: str, db: Session = Depends(get_db)):
    banner = banner_service.get_banner(db, banner_id)
    return success_response(
        "Banner fetched successfully", data=banner_service.serialize(banner)
    )


@router.api_route("/{banner_id}", methods=["POST", "PUT"])
def update_banner(
    banner_id: str,
    title: Optional[str] = Form(None),
    link_type: Optional[str] = Form(None, alias="linkType"),
    linked_category_id: Optional[str] = Form(None, alias="linkedCategoryId"),
    linked_plan_id: Optional[str] = Form(None, alias="linkedPlanId"),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    """
    Обновить баннер.

    Изображение сохраняется, если новое не передано. Ссылка другого
    типа очищается при любой записи.
    """
    data = parse(
        BannerUpdate, _form(title, link_type, linked_category_id, linked_plan_id)
    )
    banner = banner_service.update_banner(db, storage, banner_id, data, uploaded(image))
    return success_response(
        "Banner updated successfully", data=banner_service.serialize(banner)
    )


@router.delete("/{banner_id}")
def delete_banner(
    banner_id: str,
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    banner_service.delete_banner(db, storage, banner_id)
    return success_response("Banner deleted successfully", data={})
