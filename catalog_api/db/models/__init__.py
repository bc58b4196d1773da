"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .banner import Banner
from .base import Base
from .category import Category
from .plan import Plan
from .post import Post
from .user import User

__all__ = [
    "Base",
    "Banner",
    "Category",
    "Plan",
    "Post",
    "User",
]
