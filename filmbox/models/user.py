"""ORM model for storefront user accounts."""

from sqlalchemy import Column, DateTime, Integer, String, func

from filmbox.models.base import Base


class User(Base):
    """
    Registered customer.

    email is stored lower-cased; uniqueness is enforced by the table itself.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
