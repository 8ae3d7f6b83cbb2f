"""
RecipeShare Core Dependencies
FastAPI dependencies for authentication, authorization, and common functionality
"""

from fastapi import Depends, HTTPException, Query, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Annotated
import logging

from core.config import settings
from core.database import get_db
from core.exceptions import AuthenticationError
from models.user import User
from services.auth_service import auth_service
from utils.request_utils import get_client_ip, extract_request_context

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> User:
    """
    Get current authenticated user from JWT token

    Raises:
        HTTPException: If token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not credentials:
        raise credentials_exception

    try:
        user = await auth_service.get_current_user(credentials.credentials, db)
    except AuthenticationError as e:
        logger.warning(f"Authentication failed: {str(e)}", extra={
            "ip": get_client_ip(request),
            "error": str(e)
        })
        raise credentials_exception

    if not user:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled"
        )

    request.state.user_id = user.id
    request_context = extract_request_context(request)
    logger.debug(f"User {user.id} authenticated", extra={
        "user_id": user.id,
        "ip": request_context["ip"],
        "user_agent": request_context["user_agent"]["raw"]
    })

    return user


async def get_optional_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> Optional[User]:
    """
    Get current user if authenticated, None otherwise

    Used for endpoints that work for both authenticated and anonymous users
    """
    if not credentials:
        return None

    try:
        user = await auth_service.get_current_user(credentials.credentials, db)
    except AuthenticationError as e:
        logger.debug(f"Optional authentication failed: {str(e)}")
        return None

    if user and user.is_active:
        request.state.user_id = user.id
        return user

    return None


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency for admin-only endpoints"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    return current_user


async def get_pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"),
) -> dict:
    """
    Get pagination parameters

    Returns:
        Dictionary with offset, limit, page
    """
    return {
        "offset": (page - 1) * limit,
        "limit": limit,
        "page": page
    }


# Type aliases for common dependencies
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
AdminUser = Annotated[User, Depends(require_admin)]
PaginationParams = Annotated[dict, Depends(get_pagination_params)]
