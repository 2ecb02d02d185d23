"""
RBAC Route Registry

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rbac_registry.api.middleware import RequestIdMiddleware
from rbac_registry.api.v1 import router as api_v1_router
from rbac_registry.config import get_settings
from rbac_registry.database import async_session_maker, close_db, init_db
from rbac_registry.errors import ReconcileError, RegistryError
from rbac_registry.kernel.access_facade import AccessFacade
from rbac_registry.kernel.registry import collect_live_endpoints, get_service_locks
from rbac_registry.logging_config import configure_logging, get_logger
from rbac_registry.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Creates tables, snapshots the endpoints this process serves and, unless
    disabled, reconciles them into the registry under ``service_name``.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    app.state.live_endpoints = collect_live_endpoints(app.routes)

    if settings.mark_active_on_startup:
        try:
            async with async_session_maker() as session:
                result = await AccessFacade(session, get_service_locks()).mark_active(
                    settings.service_name,
                    app.state.live_endpoints,
                )
        except RegistryError as exc:
            # Keep serving; registration can be retried via POST routes/mark-active
            logger.error("Registering own routes failed: %s", exc.message)
        else:
            logger.info(
                "Registered %d routes for %s (%s)",
                len(result.routes),
                result.service,
                result.outcome.value,
            )

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    RBAC Route Registry

    Keeps track of the routes each service exposes, the roles that exist and
    which roles may invoke which routes.

    ## Features

    - **Reconciliation**: a service submits its complete route set; routes it
      no longer serves are deactivated, never deleted
    - **Roles**: flat, named roles
    - **Grants**: role-route edges, created only when both ends exist
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# add_middleware stacks innermost-first: CORS last so it wraps everything
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization", "X-Registration-Key"],
    expose_headers=["Content-Length", "X-Request-ID"],
    max_age=12 * 3600,
)


def _with_request_id(request: Request, content: dict) -> tuple[dict, dict]:
    headers = {}
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers["X-Request-ID"] = req_id
        content["request_id"] = req_id
    return content, headers


@app.exception_handler(RegistryError)
async def registry_exception_handler(request: Request, exc: RegistryError):
    """Render typed registry errors with their status and code."""
    if exc.http_status >= 500:
        logger.error("Request failed: %s", exc.message)
    content = exc.to_response()
    if isinstance(exc, ReconcileError) and exc.result is not None:
        content["outcome"] = exc.result.outcome.value
        content["activated"] = len(exc.result.routes)
    content, headers = _with_request_id(request, content)
    return JSONResponse(status_code=exc.http_status, content=content, headers=headers)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    content, headers = _with_request_id(request, {"detail": exc.detail})
    if exc.headers:
        headers.update(exc.headers)
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Malformed bodies and identifiers are client errors (400)."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    content, headers = _with_request_id(
        request,
        {"detail": "Validation error", "code": "VALIDATION_ERROR", "errors": errors},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=content,
        headers=headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    if settings.debug:
        content = {"detail": str(exc), "type": type(exc).__name__}
    else:
        content = {"detail": "Internal server error"}
    content, headers = _with_request_id(request, content)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=headers,
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(
        status="ok",
        version=settings.version,
        service=settings.service_name,
    )


app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rbac_registry.main:app",
        host="0.0.0.0",
        port=5001,
        reload=settings.debug,
    )
