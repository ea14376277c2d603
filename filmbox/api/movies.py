"""Movie catalog proxy endpoints (TMDB passthrough)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from filmbox.services.catalog import CatalogClient, CatalogError, CatalogResult, get_catalog

logger = logging.getLogger(__name__)

router = APIRouter()


def _relay(result: CatalogResult) -> Response:
    return Response(
        content=result.content,
        status_code=result.status_code,
        media_type="application/json",
    )


@router.get("/popular")
async def get_popular(
    catalog: Annotated[CatalogClient, Depends(get_catalog)],
    page: Annotated[int | None, Query()] = None,
    language: Annotated[str | None, Query()] = None,
) -> Response:
    """Popular movies, relayed from the catalog unchanged."""
    try:
        result = await catalog.popular(page=page, language=language)
    except CatalogError as e:
        logger.error("Catalog proxy error: %s", e.message, exc_info=e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load movies",
        ) from e
    return _relay(result)


@router.get("/{movie_id}")
async def get_movie(
    movie_id: int,
    catalog: Annotated[CatalogClient, Depends(get_catalog)],
    language: Annotated[str | None, Query()] = None,
) -> Response:
    """Details of one movie, relayed from the catalog unchanged."""
    try:
        result = await catalog.movie(movie_id, language=language)
    except CatalogError as e:
        logger.error("Catalog proxy error: %s", e.message, exc_info=e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load movie",
        ) from e
    return _relay(result)
