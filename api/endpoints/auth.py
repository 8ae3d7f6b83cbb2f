"""
RecipeShare Authentication Endpoints
Registration, login, token refresh and password management
"""

from fastapi import APIRouter, Request, status
import logging

from core.dependencies import CurrentUser, DbSession
from middleware.logging import log_user_activity
from schemas.auth_schemas import (
    AuthData, PasswordChange, TokenRefresh, TokenResponse, User, UserCreate, UserLogin
)
from schemas.common_schemas import ApiResponse
from services.auth_service import auth_service
from utils.request_utils import get_client_ip, get_user_agent

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, request: Request, db: DbSession):
    """
    Register a new user account

    Features:
    - Email uniqueness check
    - Password strength validation
    - Access and refresh tokens issued on success
    """
    user, tokens = await auth_service.register_user(user_data, db)

    logger.info(f"User {user.id} registered", extra={
        "ip": get_client_ip(request),
        "user_agent": get_user_agent(request)
    })

    return ApiResponse(
        message="Registration successful",
        data=AuthData(user=User.model_validate(user), tokens=tokens),
    )


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(login_data: UserLogin, request: Request, db: DbSession):
    """
    Authenticate user and return access tokens
    """
    user, tokens = await auth_service.authenticate_user(login_data, db)

    logger.info(f"User {user.id} logged in", extra={
        "ip": get_client_ip(request),
        "user_agent": get_user_agent(request)
    })

    return ApiResponse(
        message="Login successful",
        data=AuthData(user=User.model_validate(user), tokens=tokens),
    )


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh_token(token_data: TokenRefresh, db: DbSession):
    """Exchange a refresh token for a new access token"""
    tokens = await auth_service.refresh_access_token(token_data.refresh_token, db)
    return ApiResponse(message="Token refreshed successfully", data=tokens)


@router.post("/logout", response_model=ApiResponse[None])
async def logout(current_user: CurrentUser):
    """
    Log out

    Tokens are stateless, so the client is expected to discard them.
    """
    log_user_activity("logout", {"user_id": current_user.id})
    return ApiResponse(message="Logout successful")


@router.get("/me", response_model=ApiResponse[User])
async def get_me(current_user: CurrentUser):
    return ApiResponse(message="User retrieved successfully", data=User.model_validate(current_user))


@router.post("/change-password", response_model=ApiResponse[None])
async def change_password(data: PasswordChange, current_user: CurrentUser, db: DbSession):
    """Change password after verifying the current one"""
    await auth_service.change_password(current_user, data, db)
    log_user_activity("password_changed", {"user_id": current_user.id})
    return ApiResponse(message="Password changed successfully")
