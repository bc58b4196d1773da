"""
API эндпоинты управления объявлениями (только для администраторов).
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session, sessionmaker

from catalog_api.api.deps import page_params, uploaded
from catalog_api.core.auth import require_admin
from catalog_api.db.database import get_db, get_session_factory
from catalog_api.schemas.common import parse, success_response
from catalog_api.schemas.pagination import PageParams
from catalog_api.schemas.post import PostCreate, PostUpdate
from catalog_api.services import feed_service, post_service
from catalog_api.services.storage_service import StorageProvider, get_storage

router = APIRouter(dependencies=[Depends(require_admin)])


def _form(name, description, category_id, logo_url) -> dict:
    return {
        "name": name,
        "description": description,
        "categoryId": category_id,
        "logoUrl": logo_url,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    logo_url: Optional[str] = Form(None, alias="logoUrl"),
    logo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    """
    Создать объявление.

    Категория должна существовать. Логотип: файл в поле logo
    или внешний URL в поле logoUrl.
    """
    data = parse(PostCreate, _form(name, description, category_id, logo_url))
    post = post_service.create_post(db, storage, data, uploaded(logo))
    return success_response("Post created successfully", data=post_service.serialize(post))


@router.get("")
async def list_posts(
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    page = await feed_service.list_posts(session_factory, params)
    return success_response("Posts fetched successfully", **page.as_response())


@router.get("/{post_id}")
def get_post(post_id: str, db: Session = Depends(get_db)):
    post = post_service.get_post(db, post_id)
    return success_response("Post fetched successfully", data=post_service.serialize(post))


@router.api_route("/{post_id}", methods=["POST", "PUT"])
def update_post(
    post_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    logo_url: Optional[str] = Form(None, alias="logoUrl"),
    logo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    """Обновить объявление; новая категория проверяется на существование."""
    data = parse(PostUpdate, _form(name, description, category_id, logo_url))
    post = post_service.update_post(db, storage, post_id, data, uploaded(logo))
    return success_response("Post updated successfully", data=post_service.serialize(post))


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
):
    """Удалить объявление без тарифных планов."""
    post_service.delete_post(db, storage, post_id)
    return success_response("Post deleted successfully", data={})
