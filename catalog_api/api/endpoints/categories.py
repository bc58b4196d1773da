"""
API эндпоинты управления категориями (только для администраторов).
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session, sessionmaker

from catalog_api.api.deps import page_params, uploaded
from catalog_api.core.auth import require_admin
from catalog_api.db.database import get_db, get_session_factory
from catalog_api.schemas.category import CategoryCreate, CategoryUpdate
from catalog_api.schemas.common import parse, success_response
from catalog_api.schemas.pagination import PageParams
from catalog_api.services import category_service, feed_service
from catalog_api.services.storage_service import StorageProvider, get_storage

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    """
    Создать категорию.

    Принимает multipart форму: name, description и необязательное
    изображение в поле image. Slug генерируется из названия.
    """
    data = parse(CategoryCreate, {"name": name, "description": description})
    category = category_service.create_category(db, storage, data, uploaded(image))
    return success_response(
        "Category created successfully", data=category_service.serialize(category)
    )


@router.get("")
async def list_categories(
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Список категорий по алфавиту с пагинацией."""
    page = await feed_service.list_categories(session_factory, params)
    return success_response("Categories fetched successfully", **page.as_response())


@router.get("/{category_id}")
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = category_service.get_category(db, category_id)
    return success_response(
        "Category fetched successfully", data=category_service.serialize(category)
    )


@router.api_route("/{category_id}", methods=["POST", "PUT"])
def update_category(
    category_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    """
    Обновить категорию.

    Не переданные поля не меняются. При смене названия slug пересчитывается.
    """
    data = parse(CategoryUpdate, {"name": name, "description": description})
    category = category_service.update_category(
        db, storage, category_id, data, uploaded(image)
    )
    return success_response(
        "Category updated successfully", data=category_service.serialize(category)
    )


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    """Удалить категорию, если на нее не ссылаются объявления и баннеры."""
    category_service.delete_category(db, storage, category_id)
    return success_response("Category deleted successfully", data={})
