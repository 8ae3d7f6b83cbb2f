"""
RecipeShare Middleware
Custom middleware for security headers and request logging
"""

from .security import SecurityMiddleware
from .logging import LoggingMiddleware, log_user_activity, log_business_event, get_request_id

__all__ = [
    "SecurityMiddleware",
    "LoggingMiddleware",
    "log_user_activity",
    "log_business_event",
    "get_request_id",
]
