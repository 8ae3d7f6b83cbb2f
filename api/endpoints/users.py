"""
RecipeShare User Endpoints
Profiles, per-user recipe and favorite listings, stats and account removal
"""

from fastapi import APIRouter, Path
from typing import List

from core.dependencies import AdminUser, CurrentUser, DbSession, PaginationParams
from schemas.auth_schemas import AdminUserSummary, PublicUser, User, UserStats, UserUpdate
from schemas.common_schemas import ApiResponse, PaginationMeta
from schemas.recipe_schemas import RecipeSummary
from services.user_service import user_service

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[AdminUserSummary]])
async def list_users(admin: AdminUser, db: DbSession, pagination: PaginationParams):
    """All accounts, newest first (admin only)"""
    users, total = await user_service.list_users(db, pagination["offset"], pagination["limit"])
    return ApiResponse(
        message="Users retrieved successfully",
        data=[AdminUserSummary.model_validate(user) for user in users],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/profile", response_model=ApiResponse[User])
async def get_profile(current_user: CurrentUser):
    return ApiResponse(message="Profile retrieved successfully", data=User.model_validate(current_user))


@router.put("/profile", response_model=ApiResponse[User])
async def update_profile(data: UserUpdate, current_user: CurrentUser, db: DbSession):
    user = await user_service.update_profile(db, current_user, data)
    return ApiResponse(message="Profile updated successfully", data=User.model_validate(user))


@router.get("/{user_id}", response_model=ApiResponse[PublicUser])
async def get_user(db: DbSession, user_id: int = Path(..., ge=1)):
    user = await user_service.get_user(db, user_id)
    return ApiResponse(message="User retrieved successfully", data=PublicUser.model_validate(user))


@router.get("/{user_id}/recipes", response_model=ApiResponse[List[RecipeSummary]])
async def get_user_recipes(db: DbSession, pagination: PaginationParams, user_id: int = Path(..., ge=1)):
    """Published recipes by a user"""
    recipes, total = await user_service.list_published_recipes(
        db, user_id, pagination["offset"], pagination["limit"]
    )
    return ApiResponse(
        message="Recipes retrieved successfully",
        data=[RecipeSummary.model_validate(recipe) for recipe in recipes],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/{user_id}/favorites", response_model=ApiResponse[List[RecipeSummary]])
async def get_user_favorites(
    current_user: CurrentUser,
    db: DbSession,
    pagination: PaginationParams,
    user_id: int = Path(..., ge=1),
):
    """Favorited recipes (self or admin)"""
    recipes, total = await user_service.list_favorites(
        db, user_id, current_user, pagination["offset"], pagination["limit"]
    )
    return ApiResponse(
        message="Favorites retrieved successfully",
        data=[RecipeSummary.model_validate(recipe) for recipe in recipes],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/{user_id}/stats", response_model=ApiResponse[UserStats])
async def get_user_stats(db: DbSession, user_id: int = Path(..., ge=1)):
    stats = await user_service.get_stats(db, user_id)
    return ApiResponse(message="User stats retrieved successfully", data=stats)


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(current_user: CurrentUser, db: DbSession, user_id: int = Path(..., ge=1)):
    """Delete an account (self or admin)"""
    await user_service.delete_user(db, user_id, current_user)
    return ApiResponse(message="User deleted successfully")
