"""
RecipeShare Recipe Endpoints
Recipe authoring, listing, detail, publishing and favorites
"""

from fastapi import APIRouter, Path, Query, status
from typing import List, Optional

from core.dependencies import CurrentUser, DbSession, OptionalUser, PaginationParams
from models.recipe_models import Difficulty
from schemas.common_schemas import ApiResponse, PaginationMeta
from schemas.recipe_schemas import PublishStatus, RecipeCreate, RecipeDetail, RecipeSummary, RecipeUpdate
from services.recipe_service import recipe_service

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[RecipeSummary]])
async def list_recipes(
    db: DbSession,
    pagination: PaginationParams,
    difficulty: Optional[Difficulty] = Query(None),
    category_id: Optional[int] = Query(None, ge=1),
):
    """Published recipes, newest first"""
    recipes, total = await recipe_service.list_recipes(
        db, pagination["offset"], pagination["limit"], difficulty=difficulty, category_id=category_id
    )
    return ApiResponse(
        message="Recipes retrieved successfully",
        data=[RecipeSummary.model_validate(recipe) for recipe in recipes],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/popular", response_model=ApiResponse[List[RecipeSummary]])
async def popular_recipes(db: DbSession, limit: int = Query(10, ge=1, le=50)):
    """Published recipes ranked by rating, rating count and views"""
    recipes = await recipe_service.popular_recipes(db, limit)
    return ApiResponse(
        message="Popular recipes retrieved successfully",
        data=[RecipeSummary.model_validate(recipe) for recipe in recipes],
    )


@router.get("/recent", response_model=ApiResponse[List[RecipeSummary]])
async def recent_recipes(db: DbSession, limit: int = Query(10, ge=1, le=50)):
    recipes = await recipe_service.recent_recipes(db, limit)
    return ApiResponse(
        message="Recent recipes retrieved successfully",
        data=[RecipeSummary.model_validate(recipe) for recipe in recipes],
    )


@router.get("/{recipe_id}", response_model=ApiResponse[RecipeDetail])
async def get_recipe(db: DbSession, viewer: OptionalUser, recipe_id: int = Path(..., ge=1)):
    """
    Get a recipe with ingredients, instructions, categories and feedback

    Each call counts as a view. Unpublished recipes are only visible to
    their author and admins.
    """
    recipe, is_favorited, feedback = await recipe_service.get_recipe_detail(db, recipe_id, viewer)
    return ApiResponse(
        message="Recipe retrieved successfully",
        data=RecipeDetail.from_recipe(recipe, is_favorited=is_favorited, feedback=feedback),
    )


@router.post("/", response_model=ApiResponse[RecipeDetail], status_code=status.HTTP_201_CREATED)
async def create_recipe(payload: RecipeCreate, current_user: CurrentUser, db: DbSession):
    """
    Create a recipe

    Header, ingredient lines, instruction steps and category links are
    written in one transaction. Ingredients given by name only are looked
    up by exact name and created when missing.
    """
    recipe = await recipe_service.create_recipe(db, current_user, payload)
    return ApiResponse(message="Recipe created successfully", data=RecipeDetail.from_recipe(recipe))


@router.put("/{recipe_id}", response_model=ApiResponse[RecipeDetail])
async def update_recipe(
    payload: RecipeUpdate,
    current_user: CurrentUser,
    db: DbSession,
    recipe_id: int = Path(..., ge=1),
):
    """
    Replace a recipe

    Only the author or an admin may update. Every child row is replaced by
    the submitted set.
    """
    recipe = await recipe_service.update_recipe(db, recipe_id, current_user, payload)
    return ApiResponse(message="Recipe updated successfully", data=RecipeDetail.from_recipe(recipe))


@router.delete("/{recipe_id}", response_model=ApiResponse[None])
async def delete_recipe(current_user: CurrentUser, db: DbSession, recipe_id: int = Path(..., ge=1)):
    """Delete a recipe (author or admin)"""
    await recipe_service.delete_recipe(db, recipe_id, current_user)
    return ApiResponse(message="Recipe deleted successfully")


@router.post("/{recipe_id}/publish", response_model=ApiResponse[PublishStatus])
async def toggle_publish(current_user: CurrentUser, db: DbSession, recipe_id: int = Path(..., ge=1)):
    """Flip the published flag (author only)"""
    recipe = await recipe_service.toggle_publish(db, recipe_id, current_user)
    state = "published" if recipe.is_published else "unpublished"
    return ApiResponse(
        message=f"Recipe {state} successfully",
        data=PublishStatus(is_published=recipe.is_published),
    )


@router.post("/{recipe_id}/favorite", response_model=ApiResponse[None], status_code=status.HTTP_201_CREATED)
async def add_favorite(current_user: CurrentUser, db: DbSession, recipe_id: int = Path(..., ge=1)):
    await recipe_service.add_favorite(db, recipe_id, current_user)
    return ApiResponse(message="Recipe added to favorites")


@router.delete("/{recipe_id}/favorite", response_model=ApiResponse[None])
async def remove_favorite(current_user: CurrentUser, db: DbSession, recipe_id: int = Path(..., ge=1)):
    await recipe_service.remove_favorite(db, recipe_id, current_user)
    return ApiResponse(message="Recipe removed from favorites")
