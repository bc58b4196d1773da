"""
Сервис тарифных планов.
"""

import logging
from typing import Any, Dict, Literal, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, selectinload

from catalog_api.core.errors import NotFoundError, ValidationError
from catalog_api.db.models import Banner, Plan, Post
from catalog_api.schemas.common import dump
from catalog_api.schemas.plan import PlanCreate, PlanUpdate, PlanWithPost

logger = logging.getLogger(__name__)

PlanOrder = Literal["price", "latest"]


def serialize(plan: Plan) -> Dict[str, Any]:
    """План с вложенной проекцией объявления и категории объявления."""
    return dump(PlanWithPost, plan)


def list_statement(post_id: Optional[str] = None, order: PlanOrder = "price") -> Select:
    stmt = select(Plan).options(selectinload(Plan.post).selectinload(Post.category))
    if post_id is not None:
        stmt = stmt.where(Plan.post_id == post_id)
    if order == "latest":
        return stmt.order_by(Plan.created_at.desc(), Plan.id.desc())
    return stmt.order_by(Plan.price.asc(), Plan.id.asc())


def count_statement(post_id: Optional[str] = None) -> Select:
    stmt = select(func.count()).select_from(Plan)
    if post_id is not None:
        stmt = stmt.where(Plan.post_id == post_id)
    return stmt


def get_plan(db: Session, plan_id: str) -> Plan:
    plan = db.scalar(
        select(Plan)
        .options(selectinload(Plan.post).selectinload(Post.category))
        .where(Plan.id == plan_id)
    )
    if plan is None:
        raise NotFoundError("Plan not found")
    return plan


def _ensure_post(db: Session, post_id: str) -> None:
    if db.get(Post, post_id) is None:
        raise NotFoundError("Post not found")


def create_plan(db: Session, data: PlanCreate) -> Plan:
    _ensure_post(db, data.post_id)

    plan = Plan(
        post_id=data.post_id,
        duration=data.duration,
        price=data.price,
        features=list(data.features),
    )
    db.add(plan)
    db.commit()

    logger.info("Plan created: %s for post %s", plan.id, plan.post_id)
    return get_plan(db, plan.id)


def update_plan(db: Session, plan_id: str, data: PlanUpdate) -> Plan:
    plan = get_plan(db, plan_id)
    fields = data.model_dump(exclude_unset=True)

    if fields.get("post_id") and fields["post_id"] != plan.post_id:
        _ensure_post(db, fields["post_id"])
        plan.post_id = fields["post_id"]
    if fields.get("duration"):
        plan.duration = fields["duration"]
    if fields.get("price") is not None:
        plan.price = fields["price"]
    if fields.get("features") is not None:
        plan.features = list(fields["features"])

    db.commit()
    db.expire(plan)
    return get_plan(db, plan_id)


def delete_plan(db: Session, plan_id: str) -> None:
    """
    Удалить тарифный план.

    Raises:
        NotFoundError: План не найден
        ValidationError: На план ссылаются баннеры
    """
    plan = get_plan(db, plan_id)
    banners = db.scalar(
        select(func.count()).select_from(Banner).where(Banner.linked_plan_id == plan.id)
    )
    if banners:
        raise ValidationError(
            f"Plan is linked from {banners} banner(s); update or delete them first"
        )

    db.delete(plan)
    db.commit()
    logger.info("Plan deleted: %s", plan_id)
