"""
RecipeShare Backend Service - Main API Server
Recipe sharing REST API: authoring, catalog, feedback, collections and search
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import structlog
import time
from typing import Any, AsyncGenerator, Optional

from core.config import settings
from core.database import init_db, close_db, create_tables
from core.exceptions import RecipeShareError, ValidationFailedError
from api.routes import api_router
from api.endpoints import health
from middleware.security import SecurityMiddleware
from middleware.logging import LoggingMiddleware

LOG_LEVEL = logging.getLevelName(settings.LOG_LEVEL.upper())
if not isinstance(LOG_LEVEL, int):
    LOG_LEVEL = logging.INFO

# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL),
    logger_factory=structlog.WriteLoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    # Startup
    logger.info("Starting RecipeShare Backend Service", environment=settings.ENVIRONMENT)

    await init_db()
    if settings.is_sqlite:
        # SQLite deployments have no migration step
        await create_tables()

    logger.info("Backend service startup complete")

    yield

    # Shutdown
    logger.info("Shutting down RecipeShare Backend Service")
    await close_db()
    logger.info("Backend service shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="RecipeShare Backend Service",
    description="Recipe sharing API with transactional recipe authoring",
    version=settings.VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time", "X-Request-ID"]
)

# Custom Middleware
app.add_middleware(SecurityMiddleware)
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add response time header"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


def error_response(
    request: Request,
    status_code: int,
    message: str,
    error: str,
    errors: Optional[list] = None,
    headers: Optional[dict] = None,
    details: Any = None,
) -> JSONResponse:
    content = {
        "success": False,
        "message": message,
        "error": error,
        "request_id": getattr(request.state, "request_id", None),
    }
    if errors:
        content["errors"] = errors
    if details:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(RecipeShareError)
async def recipeshare_exception_handler(request: Request, exc: RecipeShareError):
    """Map service failures to their HTTP status"""
    logger.info(
        "Request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.error,
        message=exc.message
    )
    errors = exc.errors if isinstance(exc, ValidationFailedError) else None
    return error_response(request, exc.status_code, exc.message, exc.error, errors, details=exc.details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render pydantic validation failures as field/message pairs"""
    errors = []
    for err in exc.errors():
        location = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location) or "request", "message": err.get("msg", "Invalid value")})

    return error_response(request, 422, "Validation failed", "validation_error", errors)


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    """Store constraint violations that slipped past service checks"""
    logger.warning("Integrity error", path=request.url.path, error=str(exc.orig))
    return error_response(request, 409, "Request conflicts with existing data", "conflict")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    error = {
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        503: "service_unavailable",
    }.get(exc.status_code, "http_error")
    return error_response(
        request,
        exc.status_code,
        message,
        error,
        headers=getattr(exc, "headers", None),
        details=None if isinstance(exc.detail, str) else exc.detail,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(
        "Unhandled exception",
        exception=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method
    )
    return error_response(request, 500, "An unexpected error occurred", "internal_server_error")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "RecipeShare Backend Service",
        "version": settings.VERSION,
        "status": "healthy",
        "environment": settings.ENVIRONMENT
    }


# Probes outside the versioned API
app.add_api_route("/health", health.health_check, methods=["GET"], tags=["health"])
app.add_api_route("/ready", health.readiness_check, methods=["GET"], tags=["health"])

app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_config=None  # Use structlog instead
    )
