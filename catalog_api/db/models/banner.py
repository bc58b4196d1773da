"""
Модель промо-баннера.

Баннер ссылается либо на категорию, либо на тарифный план:
link_type выбирает, какое из двух полей-ссылок заполнено.
"""

from typing import Optional

from sqlalchemy import String, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin

LINK_CATEGORY = "category"
LINK_PLAN = "plan"
LINK_TYPES = (LINK_CATEGORY, LINK_PLAN)


class Banner(EntityMixin, Base):
    """
    Модель баннера.

    Attributes:
        title: Заголовок
        image_url: Публичный URL изображения
        image_key: Ключ изображения в хранилище
        link_type: Тип ссылки (category/plan)
        linked_category_id: ID категории (только для link_type=category)
        linked_plan_id: ID плана (только для link_type=plan)
    """

    __tablename__ = "banners"

    title: Mapped[str] = mapped_column(String(100))
    image_url: Mapped[str] = mapped_column(Text)
    image_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    link_type: Mapped[str] = mapped_column(String(16), index=True)
    linked_category_id: Mapped[Optional[str]] = mapped_column(
        String(32), nullable=True, index=True
    )
    linked_plan_id: Mapped[Optional[str]] = mapped_column(
        String(32), nullable=True, index=True
    )

    linked_category: Mapped[Optional["Category"]] = relationship(
        primaryjoin="foreign(Banner.linked_category_id) == Category.id",
        viewonly=True,
    )
    linked_plan: Mapped[Optional["Plan"]] = relationship(
        primaryjoin="foreign(Banner.linked_plan_id) == Plan.id",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Banner(id='{self.id}', link_type='{self.link_type}')>"


def normalize_banner_links(banner: Banner) -> Banner:
    """
    Оставить заполненной только ссылку, соответствующую link_type.

    Вызывается на каждом пути записи баннера и, дополнительно,
    перед INSERT/UPDATE через события ORM.
    """
    if banner.link_type == LINK_CATEGORY:
        banner.linked_plan_id = None
    elif banner.link_type == LINK_PLAN:
        banner.linked_category_id = None
    return banner


@event.listens_for(Banner, "before_insert")
@event.listens_for(Banner, "before_update")
def _normalize_before_write(mapper, connection, target: Banner) -> None:
    normalize_banner_links(target)
