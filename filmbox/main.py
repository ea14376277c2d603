"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filmbox.api import router as api_router
from filmbox.core.config import settings
from filmbox.core.database import PersistenceGateway
from filmbox.schemas.error import ErrorResponse
from filmbox.services.catalog import CatalogClient

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


async def initialize_schema(gateway: PersistenceGateway) -> bool:
    """
    Create tables in the background once the listener is up.

    Failure is logged and the service keeps serving; requests that need the
    database then answer 500 until the database is reachable.
    """
    try:
        await asyncio.to_thread(gateway.initialize)
    except Exception:
        logger.exception("Database initialization error; continuing without schema bootstrap")
        return False
    return True


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "invalid value")
    return f"Invalid request: {loc}: {msg}" if loc else f"Invalid request: {msg}"


def create_app(
    gateway: PersistenceGateway | None = None,
    catalog: CatalogClient | None = None,
    init_schema: bool = True,
) -> FastAPI:
    """
    Build the application. The gateway and catalog client are created once in
    the lifespan (or injected, e.g. by tests) and exposed through app.state.
    With init_schema, table creation is started after startup without blocking it.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Resources passed in by the caller are owned (and closed) by the caller.
        app.state.gateway = (
            gateway if gateway is not None else PersistenceGateway.from_settings(settings)
        )
        app.state.catalog = catalog if catalog is not None else CatalogClient(settings)
        init_task = None
        if init_schema:
            init_task = asyncio.create_task(initialize_schema(app.state.gateway))
        logger.info("FilmBox API started (env=%s)", settings.APP_ENV)
        try:
            yield
        finally:
            if init_task is not None and not init_task.done():
                init_task.cancel()
            if catalog is None:
                await app.state.catalog.aclose()
            if gateway is None:
                app.state.gateway.dispose()

    app = FastAPI(
        title="FilmBox API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=_validation_message(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
