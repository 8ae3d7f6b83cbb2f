"""
RecipeShare Logging Middleware
Per-request structlog context, access logging and business event helpers
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import structlog
import time
import uuid
from typing import Dict, Any, Optional
from jose import JWTError, jwt

from core.config import settings
from utils.request_utils import get_client_ip

logger = structlog.get_logger()

QUIET_PATHS = frozenset({"/health", "/ready", "/live", "/favicon.ico"})
MASKED_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-auth-token"})


def bearer_subject(request: Request) -> Optional[str]:
    """User id carried by the bearer token, or None; the account itself is not looked up"""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None

    try:
        claims = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    return claims.get("sub")


def masked_headers(request: Request) -> Dict[str, str]:
    return {
        name: "***" if name.lower() in MASKED_HEADERS else value
        for name, value in request.headers.items()
    }


def level_for_status(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds request_id (and user_id when a bearer token decodes) into the
    structlog context for everything logged while the request runs, then
    writes one access line with status and timing.
    """

    def __init__(self, app, slow_request_threshold: Optional[float] = None):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold or settings.SLOW_REQUEST_THRESHOLD

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        user_id = bearer_subject(request)
        if user_id:
            structlog.contextvars.bind_contextvars(user_id=user_id)

        quiet = request.url.path in QUIET_PATHS
        if not quiet:
            logger.debug(
                "Request received",
                method=request.method,
                path=request.url.path,
                query=dict(request.query_params),
                client_ip=get_client_ip(request),
                headers=masked_headers(request),
            )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                duration=round(time.perf_counter() - started, 4),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        duration = time.perf_counter() - started
        response.headers["X-Request-ID"] = request_id

        if not quiet:
            getattr(logger, level_for_status(response.status_code))(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration=round(duration, 4),
                response_size=response.headers.get("content-length"),
            )
            if duration > self.slow_request_threshold:
                logger.warning("Slow request", endpoint=f"{request.method} {request.url.path}", duration=duration)

        return response


def get_request_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get("request_id")


def log_user_activity(activity: str, details: Dict[str, Any] = None):
    """Account-level actions (logout, password change)"""
    logger.info("User activity", activity=activity, details=details or {})


def log_business_event(event_name: str, data: Dict[str, Any] = None):
    """Domain events emitted by services after a successful commit"""
    logger.info("Business event", event_name=event_name, data=data or {})
