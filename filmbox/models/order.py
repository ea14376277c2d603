"""ORM model for ticket orders."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, func

from filmbox.models.base import Base


class Order(Base):
    """
    Ticket purchase owned by a user.

    total is stored exactly as the client computed it.
    """

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    film_title = Column(String(255), nullable=False)
    film_id = Column(Integer, nullable=True)
    format = Column(String(50), nullable=False)
    quantity = Column(Integer, nullable=False, default=1, server_default="1")
    price = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
