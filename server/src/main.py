"""
FastAPI application entry point for the Bloglist API.

This module provides the FastAPI application factory with:
- Blog, person, user and login routers
- Bearer token extraction
- Request logging and Prometheus metrics
- Uniform ``{"error": message}`` error responses
- Health, readiness and metrics endpoints
- MongoDB client lifecycle (motor) with index creation at startup
"""

import time
import uuid
import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from server.src.config import Settings, get_settings
from server.src.errors import BloglistError
from server.src.middleware.auth import TokenExtractorMiddleware
from server.src.repositories.person_repo import PersonRepository
from server.src.repositories.user_repo import UserRepository
from server.src.routers import blogs, persons, testing, users
from shared.logging import bind_context, clear_context, configure_logging
from shared.metrics import EntryMetrics, HttpMetrics, get_metrics_handler, setup_metrics

logger = structlog.get_logger(__name__)

# First path segment under the API prefix -> collection label
COLLECTIONS = {"bloglist": "blogs", "persons": "persons", "users": "users"}

UNMATCHED_ENDPOINT = "unmatched"

# ============================================================================
# Lifespan Management
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Handles:
    - MongoDB client creation (unless a database was injected)
    - Unique index creation
    - Graceful shutdown and client cleanup
    """
    settings: Settings = app.state.settings

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )

    client: Optional[AsyncIOMotorClient] = None

    try:
        if app.state.database is None:
            logger.info("connecting_to_mongodb", database=settings.mongodb_database)
            client = AsyncIOMotorClient(
                settings.mongodb_url,
                serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms
            )
            app.state.database = client[settings.mongodb_database]

        logger.info("ensuring_indexes")
        await UserRepository(app.state.database).ensure_indexes()
        await PersonRepository(app.state.database).ensure_indexes()

        logger.info("application_started", app_name=settings.app_name)

        yield

    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    finally:
        logger.info("application_shutting_down")
        if client is not None:
            client.close()
            app.state.database = None
            logger.info("mongodb_client_closed")
        logger.info("application_shutdown_complete")


# ============================================================================
# Request Logging and Metrics Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics."""

    def __init__(self, app, http_metrics: HttpMetrics, entry_metrics: EntryMetrics, api_prefix: str):
        super().__init__(app)
        self.http_metrics = http_metrics
        self.entry_metrics = entry_metrics
        self.api_prefix = api_prefix

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        bind_context(correlation_id=correlation_id)

        method = request.method
        path = request.url.path
        endpoint = self._get_endpoint(request)

        self.http_metrics.requests_in_progress.labels(method=method, endpoint=endpoint).inc()
        start_time = time.time()

        logger.info(
            "request_started",
            method=method,
            path=path,
            client_ip=request.client.host if request.client else "unknown"
        )

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            self.http_metrics.requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=response.status_code
            ).inc()
            self.http_metrics.request_duration.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)
            self._record_entry_metrics(method, path, response.status_code)

            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration=f"{duration:.3f}s"
            )

            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as e:
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{time.time() - start_time:.3f}s",
                exc_info=True
            )
            raise

        finally:
            self.http_metrics.requests_in_progress.labels(method=method, endpoint=endpoint).dec()
            clear_context()

    def _get_collection(self, path: str) -> Optional[str]:
        """Extract the collection name from an API path."""
        if not path.startswith(self.api_prefix):
            return None
        parts = path[len(self.api_prefix):].strip("/").split("/")
        return COLLECTIONS.get(parts[0]) if parts else None

    def _get_endpoint(self, request: Request) -> str:
        """Route template of the request, so unknown URLs share one label."""
        for route in request.app.router.routes:
            match, _ = route.matches(request.scope)
            if match != Match.NONE:
                return route.path
        return UNMATCHED_ENDPOINT

    def _record_entry_metrics(self, method: str, path: str, status_code: int) -> None:
        collection = self._get_collection(path)
        if collection is None:
            return
        if 400 <= status_code < 500:
            self.entry_metrics.failures.labels(collection=collection, error_type=str(status_code)).inc()
            return
        operation = {"POST": "create", "PUT": "update", "DELETE": "delete"}.get(method)
        if operation and status_code < 300:
            self.entry_metrics.mutations.labels(collection=collection, operation=operation).inc()


# ============================================================================
# Exception Handlers
# ============================================================================


def _describe_validation_errors(errors) -> str:
    """Turn pydantic error entries into one message naming each field."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        if error.get("type") == "missing":
            messages.append(f"`{field}` is required")
        else:
            messages.append(f"`{field}`: {error.get('msg')}")
    return "; ".join(messages)


async def bloglist_exception_handler(request: Request, exc: BloglistError):
    """Handle errors raised by repositories, services and routers."""
    logger.warning(
        "request_rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.message
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=exc.headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors as 400 Bad Request."""
    message = _describe_validation_errors(exc.errors())
    logger.warning("validation_error", path=request.url.path, error=message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions (unknown endpoints, wrong methods)."""
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        detail = "unknown endpoint"
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal server error"}
    )


# ============================================================================
# FastAPI Application
# ============================================================================


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[AsyncIOMotorDatabase] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to the cached settings)
        database: Pre-built database handle; when omitted the lifespan
            connects to ``settings.mongodb_url``

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
        environment=settings.environment
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="REST API for blogs, phonebook persons, users and login.",
        lifespan=lifespan,
        debug=settings.debug and not settings.is_production,
    )
    app.state.settings = settings
    app.state.database = database

    registry = CollectorRegistry()
    http_metrics, entry_metrics = setup_metrics(registry)
    render_metrics = get_metrics_handler(registry)

    # Middleware
    app.add_middleware(TokenExtractorMiddleware)
    app.add_middleware(
        RequestLoggingMiddleware,
        http_metrics=http_metrics,
        entry_metrics=entry_metrics,
        api_prefix=settings.api_prefix
    )

    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
        )

    # Exception handlers
    app.add_exception_handler(BloglistError, bloglist_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Routers
    app.include_router(blogs.router, prefix=settings.api_prefix)
    app.include_router(persons.router, prefix=settings.api_prefix)
    app.include_router(users.users_router, prefix=settings.api_prefix)
    app.include_router(users.login_router, prefix=settings.api_prefix)

    if settings.is_test:
        logger.info("testing_endpoints_enabled")
        app.include_router(testing.router, prefix=settings.api_prefix)

    # ========================================================================
    # Health, Readiness and Metrics Endpoints
    # ========================================================================

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Basic health status without checking dependencies."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment
        }

    @app.get("/ready", tags=["Health"])
    async def readiness_check() -> JSONResponse:
        """Readiness status; pings MongoDB."""
        checks = {"database": "unknown"}

        try:
            await app.state.database.command("ping")
            checks["database"] = "healthy"
        except Exception as e:
            logger.error("database_health_check_failed", error=str(e))
            checks["database"] = "unhealthy"

        all_healthy = all(value == "healthy" for value in checks.values())

        return JSONResponse(
            status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ready" if all_healthy else "not_ready",
                "service": settings.app_name,
                "checks": checks
            }
        )

    if settings.metrics_enabled:
        @app.get(settings.metrics_endpoint, tags=["Monitoring"])
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(content=render_metrics(), media_type=CONTENT_TYPE_LATEST)

    return app


# ============================================================================
# Application Entry Point
# ============================================================================


def run() -> None:
    """Run the application with Uvicorn."""
    settings = get_settings()
    reload = settings.debug and not settings.is_production

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=reload
    )

    uvicorn.run(
        "server.src.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run()
