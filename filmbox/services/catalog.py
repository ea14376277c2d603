"""TMDB catalog proxy: forward read-only movie queries and relay the upstream JSON as-is."""

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
from fastapi import Request

if TYPE_CHECKING:
    from filmbox.core.config import Settings

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the upstream catalog is unreachable, times out, or returns non-JSON."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


@dataclass(frozen=True)
class CatalogResult:
    """Upstream response relayed untouched: raw JSON bytes and status code."""

    status_code: int
    content: bytes


class CatalogClient:
    """
    Thin TMDB client holding one pooled httpx.AsyncClient for the process.

    The server-side API key is appended to every request; the response body
    is never parsed into a model, only checked to be JSON.
    """

    def __init__(self, settings: "Settings", client: httpx.AsyncClient | None = None) -> None:
        self.base_url = settings.TMDB_BASE_URL.rstrip("/")
        self.default_language = settings.TMDB_DEFAULT_LANGUAGE
        self._api_key = (
            settings.TMDB_API_KEY.get_secret_value() if settings.TMDB_API_KEY else None
        )
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.TMDB_REQUEST_TIMEOUT_SEC)
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def popular(self, page: int | None = None, language: str | None = None) -> CatalogResult:
        """Fetch a page of popular movies (default page 1, default language)."""
        return await self._get(
            "/movie/popular",
            {"language": language or self.default_language, "page": page or 1},
        )

    async def movie(self, movie_id: int, language: str | None = None) -> CatalogResult:
        """Fetch details for one movie."""
        return await self._get(
            f"/movie/{movie_id}",
            {"language": language or self.default_language},
        )

    async def _get(self, path: str, params: dict[str, Any]) -> CatalogResult:
        query = dict(params)
        if self._api_key:
            query["api_key"] = self._api_key
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(url, params=query)
        except httpx.TimeoutException as e:
            raise CatalogError("Catalog request timed out", cause=e) from e
        except httpx.HTTPError as e:
            raise CatalogError("Catalog request failed", cause=e) from e

        try:
            json.loads(response.content)
        except ValueError as e:
            raise CatalogError(
                f"Catalog returned a non-JSON body (status {response.status_code})",
                cause=e,
            ) from e

        logger.debug("Catalog %s -> %s", path, response.status_code)
        return CatalogResult(status_code=response.status_code, content=response.content)


def get_catalog(request: Request) -> CatalogClient:
    """Dependency that returns the catalog client built by the application lifespan."""
    return request.app.state.catalog
