"""
RecipeShare Core Module
Central configuration and utilities
"""

from .config import settings
from .database import Base, get_db, get_db_session, init_db, close_db, run_in_transaction
from .exceptions import (
    RecipeShareError,
    ValidationFailedError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
)

__all__ = [
    "settings",
    "Base",
    "get_db",
    "get_db_session",
    "init_db",
    "close_db",
    "run_in_transaction",
    "RecipeShareError",
    "ValidationFailedError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
]
