"""Ticket orders of the authenticated user."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from filmbox.api.auth import SERVER_ERROR, get_current_user
from filmbox.core.database import PersistenceError, PersistenceGateway, get_gateway
from filmbox.schemas.auth import CurrentUser
from filmbox.schemas.order import (
    OrderCreateRequest,
    OrderCreatedResponse,
    OrdersResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MISSING_ORDER_FIELDS = "Please fill in all order fields"


def _missing_required(body: OrderCreateRequest) -> bool:
    """True when a required field is absent, blank, or zero (the storefront never sends zero)."""
    if not body.film_title or not body.film_title.strip():
        return True
    if not body.format or not body.format.strip():
        return True
    return not (body.quantity and body.price and body.total)


@router.get("", response_model=OrdersResponse)
def list_orders(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    gateway: Annotated[PersistenceGateway, Depends(get_gateway)],
) -> OrdersResponse:
    """Return the caller's orders, newest first."""
    try:
        orders = gateway.list_orders_for_user(current_user.id)
    except PersistenceError as e:
        logger.error("Get orders failed: %s", e.message, exc_info=e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR
        ) from e
    return OrdersResponse(orders=orders)


@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    gateway: Annotated[PersistenceGateway, Depends(get_gateway)],
) -> OrderCreatedResponse:
    """
    Record an order for the caller.

    The owner is taken from the token. quantity, price and total are stored
    exactly as sent; total is not recomputed.
    """
    if _missing_required(body):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_ORDER_FIELDS)

    try:
        order = gateway.insert_order(
            user_id=current_user.id,
            film_title=body.film_title.strip(),
            film_id=body.film_id,
            format=body.format.strip(),
            quantity=body.quantity,
            price=body.price,
            total=body.total,
        )
    except PersistenceError as e:
        logger.error("Create order failed: %s", e.message, exc_info=e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR
        ) from e
    return OrderCreatedResponse(order=order)
