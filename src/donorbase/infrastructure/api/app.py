"""FastAPI application for DonorBase.

``create_app`` wires the routers, the shared snapshot hub, the domain error
mapping and the request logging middleware. ``app`` is the instance uvicorn
serves.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from donorbase.core.config import Settings, get_settings
from donorbase.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from donorbase.domain.exceptions import (
    DomainValidationError,
    DonationNotFoundError,
    DonorBaseError,
    EventNotFoundError,
    PermissionDeniedError,
    PersistenceError,
    SchemaVersionConflictError,
)
from donorbase.infrastructure import SnapshotHub, close_database, get_db_manager, init_database
from donorbase.infrastructure.api.schemas import (
    ConflictResponse,
    ErrorResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Domain errors answered with a plain ErrorResponse body
ERROR_STATUS: dict[type[DonorBaseError], tuple[int, str]] = {
    EventNotFoundError: (status.HTTP_404_NOT_FOUND, "Not found"),
    DonationNotFoundError: (status.HTTP_404_NOT_FOUND, "Not found"),
    PermissionDeniedError: (status.HTTP_403_FORBIDDEN, "Forbidden"),
    PersistenceError: (status.HTTP_503_SERVICE_UNAVAILABLE, "Service unavailable"),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting DonorBase", version=settings.app_version, environment=settings.environment)

    await init_database()

    yield

    # Ends every open SSE/WebSocket subscription before the engine goes away
    app.state.snapshot_hub.close()
    await close_database()
    logger.info("DonorBase stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    docs = settings.is_development or settings.debug

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Donation tracking for events with custom donor fields",
        docs_url="/docs" if docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs else None,
        lifespan=lifespan,
    )
    app.state.snapshot_hub = SnapshotHub()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        expose_headers=[CORRELATION_HEADER, "Content-Disposition"],
    )

    register_health_check(app, settings)
    register_routes(app, settings)
    register_exception_handlers(app)
    register_middleware(app)
    return app


def register_health_check(app: FastAPI, settings: Settings) -> None:

    @app.get("/health", tags=["health"])
    async def health_check():
        return {"status": "healthy", "service": settings.app_name, "version": settings.app_version}

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """503 until the database answers."""
        if await get_db_manager().check_connection():
            return {"status": "ready", "database": "connected"}
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "database": "disconnected"},
        )


def register_routes(app: FastAPI, settings: Settings) -> None:
    from donorbase.infrastructure.api.routes import (
        donations_router,
        events_router,
        exports_router,
        fields_router,
        insights_router,
        realtime_router,
    )

    prefix = settings.api_prefix
    event_prefix = f"{prefix}/events/{{event_id}}"

    app.include_router(events_router, prefix=f"{prefix}/events", tags=["events"])
    app.include_router(fields_router, prefix=f"{event_prefix}/fields", tags=["fields"])
    app.include_router(donations_router, prefix=f"{event_prefix}/donations", tags=["donations"])
    app.include_router(insights_router, prefix=f"{event_prefix}/insights", tags=["insights"])
    app.include_router(exports_router, prefix=f"{event_prefix}/export", tags=["exports"])
    app.include_router(realtime_router, prefix=f"{prefix}/realtime", tags=["realtime"])

    @app.get(prefix, tags=["root"])
    async def api_root():
        return {"name": settings.app_name, "version": settings.app_version, "api_version": "v1"}


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain exceptions raised by the services into responses."""

    @app.exception_handler(DomainValidationError)
    async def validation_error_handler(request: Request, exc: DomainValidationError):
        body = ValidationErrorResponse(
            details=[
                ValidationErrorDetail(field=e.field, message=e.message, code=e.code)
                for e in exc.errors
            ]
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())

    @app.exception_handler(SchemaVersionConflictError)
    async def conflict_handler(request: Request, exc: SchemaVersionConflictError):
        body = ConflictResponse(
            error="Conflict",
            message=str(exc),
            expected_version=exc.expected_version,
            actual_version=exc.actual_version,
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content=body.model_dump(by_alias=True)
        )

    async def domain_error_handler(request: Request, exc: DonorBaseError):
        status_code, error = ERROR_STATUS[type(exc)]
        if status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=str(exc))
        elif isinstance(exc, PermissionDeniedError):
            logger.info("Permission denied", path=request.url.path, operation=exc.operation)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=error, message=str(exc)).model_dump(),
        )

    for exc_class in ERROR_STATUS:
        app.add_exception_handler(exc_class, domain_error_handler)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception",
            method=request.method,
            path=request.url.path,
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        """Bind a correlation ID for the request and log its outcome."""
        correlation_id = request.headers.get(CORRELATION_HEADER) or f"cid_{uuid.uuid4().hex[:12]}"
        bind_correlation_id(correlation_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            clear_context()


app = create_app()
