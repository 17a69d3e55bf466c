"""
User Management Service

FastAPI application entry point.
"""

import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_accounts.api.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from user_accounts.api.v1 import router as api_router
from user_accounts.config import get_settings
from user_accounts.database import check_db, close_db, init_db
from user_accounts.kernel.identity.errors import ConfigurationError
from user_accounts.logging_config import configure_logging, get_logger
from user_accounts.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Refuses to start without a signing secret.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    try:
        settings.require_jwt_secret()
    except ConfigurationError:
        logger.critical("JWT_SECRET is not configured; refusing to start")
        raise

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="Account registration and JWT login.",
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# add_middleware stacks innermost-first: CORS is added last so it wraps everything
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", REQUEST_ID_HEADER],
)

AVAILABLE_ROUTES = [
    "GET /",
    "GET /health",
    f"POST {settings.api_prefix}/register",
    f"POST {settings.api_prefix}/login",
    f"GET {settings.api_prefix}/me",
]


def _origin_allowed(origin: str) -> bool:
    if origin in settings.cors_origins:
        return True
    return bool(settings.cors_origin_regex and re.fullmatch(settings.cors_origin_regex, origin))


def _error_headers(request: Request) -> dict:
    """CORS and request-id headers for error responses (500s often bypass CORS middleware)."""
    headers = {}
    origin = request.headers.get("origin") or ""
    if origin and _origin_allowed(origin):
        headers["Access-Control-Allow-Origin"] = origin
        headers["Access-Control-Allow-Credentials"] = "true"
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers[REQUEST_ID_HEADER] = req_id
    return headers


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as ``{"error": ...}``."""
    headers = _error_headers(request)
    if exc.headers:
        headers.update(exc.headers)

    if exc.status_code == status.HTTP_404_NOT_FOUND and "endpoint" not in request.scope:
        logger.info("404 - Route not found: %s", request.url.path)
        content = {
            "error": "Route not found",
            "path": request.url.path,
            "available_routes": AVAILABLE_ROUTES,
        }
    elif isinstance(exc.detail, dict):
        content = dict(exc.detail)
    else:
        content = {"error": exc.detail}

    req_id = getattr(request.state, "request_id", None)
    if req_id and exc.status_code >= 500:
        content["request_id"] = req_id
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Malformed request bodies are client errors (400)."""
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part != "body"]
        fields.append(".".join(loc) or "body")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "fields": fields},
        headers=_error_headers(request),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions without leaking internals."""
    logger.exception("Unhandled exception: %s", exc)
    req_id = getattr(request.state, "request_id", None)
    if settings.debug:
        content = {
            "error": str(exc),
            "type": type(exc).__name__,
            "request_id": req_id,
        }
    else:
        content = {"error": "Internal server error", "request_id": req_id}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=_error_headers(request),
    )


@app.get("/", tags=["Root"])
async def root():
    """Service banner."""
    return {
        "message": f"{settings.project_name} is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    connected = await check_db()
    return HealthResponse(
        status="ok",
        service=settings.project_name,
        version=settings.version,
        timestamp=datetime.now(timezone.utc),
        port=settings.port,
        database="connected" if connected else "disconnected",
    )


app.include_router(api_router, prefix=settings.api_prefix)


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "user_accounts.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
