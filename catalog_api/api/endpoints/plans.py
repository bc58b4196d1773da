"""
API эндпоинты управления тарифными планами (только для администраторов).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, sessionmaker

from catalog_api.api.deps import page_params
from catalog_api.core.auth import require_admin
from catalog_api.db.database import get_db, get_session_factory
from catalog_api.schemas.common import success_response
from catalog_api.schemas.pagination import PageParams
from catalog_api.schemas.plan import PlanCreate, PlanUpdate
from catalog_api.services import feed_service, plan_service

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_plan(body: PlanCreate, db: Session = Depends(get_db)):
    """Создать тарифный план для существующего объявления."""
    plan = plan_service.create_plan(db, body)
    return success_response("Plan created successfully", data=plan_service.serialize(plan))


@router.get("")
async def list_plans(
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Все планы по возрастанию цены, с объявлением и категорией."""
    page = await feed_service.list_plans(session_factory, params)
    return success_response("Plans fetched successfully", **page.as_response())


@router.get("/post/{post_id}")
async def list_plans_by_post(
    post_id: str,
    params: PageParams = Depends(page_params),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Планы объявления; 404 если объявления нет, пустой список если нет планов."""
    page = await feed_service.list_plans_by_post(session_factory, post_id, params)
    return success_response("Plans fetched successfully", **page.as_response())


@router.get("/{plan_id}")
def get_plan(plan_id: str, db: Session = Depends(get_db)):
    plan = plan_service.get_plan(db, plan_id)
    return success_response("Plan fetched successfully", data=plan_service.serialize(plan))


@router.api_route("/{plan_id}", methods=["POST", "PUT"])
def update_plan(plan_id: str, body: PlanUpdate, db: Session = Depends(get_db)):
    plan = plan_service.update_plan(db, plan_id, body)
    return success_response("Plan updated successfully", data=plan_service.serialize(plan))


@router.delete("/{plan_id}")
def delete_plan(plan_id: str, db: Session = Depends(get_db)):
    """Удалить план, если на него не ссылаются баннеры."""
    plan_service.delete_plan(db, plan_id)
    return success_response("Plan deleted successfully", data={})
