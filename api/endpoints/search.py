"""
RecipeShare Search Endpoints
Recipe search with filters and quick lookups
"""

from fastapi import APIRouter, Query
from typing import List, Optional

from core.dependencies import DbSession, PaginationParams
from models.recipe_models import Difficulty
from schemas.auth_schemas import PublicUser
from schemas.common_schemas import ApiResponse, PaginationMeta
from schemas.recipe_schemas import CategoryOut, IngredientOut, RecipeSummary
from services.search_service import SearchType, SortBy, SortOrder, search_service

router = APIRouter()


@router.get("/recipes", response_model=ApiResponse[List[RecipeSummary]])
async def search_recipes(
    db: DbSession,
    pagination: PaginationParams,
    query: Optional[str] = Query(None, max_length=100),
    search_type: SearchType = Query(SearchType.BOTH),
    category_id: Optional[int] = Query(None, ge=1),
    difficulty: Optional[Difficulty] = Query(None),
    max_prep_time: Optional[int] = Query(None, ge=0),
    max_cook_time: Optional[int] = Query(None, ge=0),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    sort_by: SortBy = Query(SortBy.DATE),
    sort_order: SortOrder = Query(SortOrder.DESC),
):
    """
    Search published recipes

    Features:
    - Text match on name/description, ingredient names, or both
    - Category, difficulty, timing and minimum rating filters
    - Sorting by rating, date, views or name
    """
    recipes, total = await search_service.search_recipes(
        db,
        pagination["offset"],
        pagination["limit"],
        query=query,
        search_type=search_type,
        category_id=category_id,
        difficulty=difficulty,
        max_prep_time=max_prep_time,
        max_cook_time=max_cook_time,
        min_rating=min_rating,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ApiResponse(
        message="Search completed successfully",
        data=[RecipeSummary.model_validate(recipe) for recipe in recipes],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/ingredients", response_model=ApiResponse[List[IngredientOut]])
async def search_ingredients(db: DbSession, query: str = Query("", max_length=100)):
    ingredients = await search_service.search_ingredients(db, query)
    return ApiResponse(
        message="Search completed successfully",
        data=[IngredientOut.model_validate(ingredient) for ingredient in ingredients],
    )


@router.get("/categories", response_model=ApiResponse[List[CategoryOut]])
async def search_categories(db: DbSession, query: str = Query("", max_length=100)):
    categories = await search_service.search_categories(db, query)
    return ApiResponse(
        message="Search completed successfully",
        data=[CategoryOut.model_validate(category) for category in categories],
    )


@router.get("/users", response_model=ApiResponse[List[PublicUser]])
async def search_users(db: DbSession, query: str = Query("", max_length=100)):
    users = await search_service.search_users(db, query)
    return ApiResponse(
        message="Search completed successfully",
        data=[PublicUser.model_validate(user) for user in users],
    )
