"""
RecipeShare Error Types
Failure kinds raised by services and mapped to HTTP responses in main.py
"""

from typing import Any, Dict, List, Optional


class RecipeShareError(Exception):
    """Base class for expected, client-visible failures"""

    status_code: int = 400
    error: str = "bad_request"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationFailedError(RecipeShareError):
    """Payload failed a shape or range check"""

    status_code = 422
    error = "validation_error"

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []


class AuthenticationError(RecipeShareError):
    """Credentials missing, invalid or expired"""

    status_code = 401
    error = "unauthorized"


class ForbiddenError(RecipeShareError):
    """Caller is known but not allowed to touch the resource"""

    status_code = 403
    error = "forbidden"


class NotFoundError(RecipeShareError):
    """Addressed resource does not exist"""

    status_code = 404
    error = "not_found"

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        super().__init__(message, {"resource": resource, "id": resource_id})
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(RecipeShareError):
    """Referenced row missing, duplicate entry, or store constraint violation"""

    status_code = 409
    error = "conflict"
