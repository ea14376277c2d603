"""API routes, mounted under API_PREFIX (default /api)."""

from fastapi import APIRouter

from filmbox.api import auth, health, movies, orders
from filmbox.schemas.error import ErrorResponse

router = APIRouter(responses={500: {"model": ErrorResponse}})
router.include_router(auth.router, tags=["auth"])
router.include_router(orders.router, prefix="/orders", tags=["orders"])
router.include_router(movies.router, prefix="/movies", tags=["movies"])
router.include_router(health.router, prefix="/health", tags=["health"])
