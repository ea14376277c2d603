"""Pydantic request/response schemas."""

from filmbox.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserPublic,
)
from filmbox.schemas.error import ErrorResponse
from filmbox.schemas.health import HealthResponse
from filmbox.schemas.order import (
    OrderCreateRequest,
    OrderCreatedResponse,
    OrderRead,
    OrdersResponse,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MeResponse",
    "OrderCreateRequest",
    "OrderCreatedResponse",
    "OrderRead",
    "OrdersResponse",
    "RegisterRequest",
    "UserPublic",
]
