"""
RecipeShare Security Middleware
Implements security headers and request size/path validation
"""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import structlog
from typing import Optional

from core.config import settings
from utils.request_utils import get_client_ip
from utils.security import security_utils

logger = structlog.get_logger()


class SecurityMiddleware(BaseHTTPMiddleware):
    """
    Security middleware that adds:
    - Security headers
    - Request size limits
    - Path traversal rejection
    """

    def __init__(self, app, max_request_size: Optional[int] = None):
        super().__init__(app)
        self.max_request_size = max_request_size or settings.MAX_REQUEST_SIZE

    async def dispatch(self, request: Request, call_next):
        """Process request through security checks"""
        violation = self._validate_request(request)
        if violation:
            return violation

        response = await call_next(request)
        self._add_security_headers(response, request)
        return response

    def _validate_request(self, request: Request) -> Optional[JSONResponse]:
        """Validate request before it reaches a route"""
        client_ip = get_client_ip(request)

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_request_size:
            self._record_security_violation(client_ip, "oversized_request")
            return self._reject(413, "Request too large", "payload_too_large", request)

        if self._has_path_traversal(request.url.path):
            self._record_security_violation(client_ip, "path_traversal")
            return self._reject(403, "Forbidden", "forbidden", request)

        return None

    def _reject(self, status_code: int, message: str, error: str, request: Request) -> JSONResponse:
        response = JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "message": message,
                "error": error,
                "request_id": getattr(request.state, "request_id", None),
            }
        )
        self._add_security_headers(response, request)
        return response

    def _has_path_traversal(self, path: str) -> bool:
        """Check for path traversal attempts"""
        dangerous_patterns = ["../", "..\\", "..%2f", "..%5c", "%2e%2e%2f", "%2e%2e%5c"]
        path_lower = path.lower()

        return any(pattern in path_lower for pattern in dangerous_patterns)

    def _record_security_violation(self, client_ip: str, violation_type: str):
        logger.warning(
            "Security violation detected",
            client_ip=client_ip,
            violation_type=violation_type,
        )

    def _add_security_headers(self, response: Response, request: Request):
        """Add security headers to response"""
        headers = security_utils.get_security_headers(hsts=request.url.scheme == "https")
        headers["X-Permitted-Cross-Domain-Policies"] = "none"

        for name, value in headers.items():
            response.headers[name] = value

        # API responses are user-specific
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
