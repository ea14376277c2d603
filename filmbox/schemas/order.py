"""Request/response schemas for ticket orders."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class OrderCreateRequest(BaseModel):
    """
    Order form as sent by the storefront (camelCase keys).

    Required fields are declared optional so missing ones are reported with
    a single 400 message by the handler. Any userId in the body is ignored;
    ownership comes from the token.
    """

    model_config = ConfigDict(populate_by_name=True)

    film_title: str | None = Field(default=None, alias="filmTitle", max_length=255)
    film_id: int | None = Field(default=None, alias="filmId")
    format: str | None = Field(default=None, max_length=50)
    quantity: int | None = None
    price: Decimal | None = None
    total: Decimal | None = None


class OrderRead(BaseModel):
    """A stored order, keyed by column name."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    film_title: str
    film_id: int | None = None
    format: str
    quantity: int
    price: Decimal
    total: Decimal
    created_at: datetime | None = None


class OrderCreatedResponse(BaseModel):
    """Response for POST /orders."""

    success: bool = True
    order: OrderRead


class OrdersResponse(BaseModel):
    """Response for GET /orders, newest first."""

    orders: list[OrderRead]
