"""SQLAlchemy ORM models."""

from filmbox.models.base import Base
from filmbox.models.order import Order
from filmbox.models.user import User

__all__ = ["Base", "Order", "User"]
