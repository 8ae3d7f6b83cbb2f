"""
RecipeShare Ingredient Endpoints
Shared ingredient catalog
"""

from fastapi import APIRouter, Path, Query, status
from typing import List

from core.dependencies import AdminUser, CurrentUser, DbSession, PaginationParams
from schemas.common_schemas import ApiResponse, PaginationMeta
from schemas.recipe_schemas import IngredientCreate, IngredientOut, IngredientUpdate
from services.ingredient_service import ingredient_service

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[IngredientOut]])
async def list_ingredients(db: DbSession, pagination: PaginationParams):
    ingredients, total = await ingredient_service.list_ingredients(db, pagination["offset"], pagination["limit"])
    return ApiResponse(
        message="Ingredients retrieved successfully",
        data=[IngredientOut.model_validate(ingredient) for ingredient in ingredients],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/search", response_model=ApiResponse[List[IngredientOut]])
async def search_ingredients(db: DbSession, query: str = Query("", max_length=100)):
    """Substring match on ingredient names"""
    ingredients = await ingredient_service.search_ingredients(db, query)
    return ApiResponse(
        message="Ingredients retrieved successfully",
        data=[IngredientOut.model_validate(ingredient) for ingredient in ingredients],
    )


@router.get("/{ingredient_id}", response_model=ApiResponse[IngredientOut])
async def get_ingredient(db: DbSession, ingredient_id: int = Path(..., ge=1)):
    ingredient = await ingredient_service.get_ingredient(db, ingredient_id)
    return ApiResponse(message="Ingredient retrieved successfully", data=IngredientOut.model_validate(ingredient))


@router.post("/", response_model=ApiResponse[IngredientOut], status_code=status.HTTP_201_CREATED)
async def create_ingredient(data: IngredientCreate, current_user: CurrentUser, db: DbSession):
    ingredient = await ingredient_service.create_ingredient(db, data)
    return ApiResponse(message="Ingredient created successfully", data=IngredientOut.model_validate(ingredient))


@router.put("/{ingredient_id}", response_model=ApiResponse[IngredientOut])
async def update_ingredient(
    data: IngredientUpdate, admin: AdminUser, db: DbSession, ingredient_id: int = Path(..., ge=1)
):
    ingredient = await ingredient_service.update_ingredient(db, ingredient_id, data)
    return ApiResponse(message="Ingredient updated successfully", data=IngredientOut.model_validate(ingredient))


@router.delete("/{ingredient_id}", response_model=ApiResponse[None])
async def delete_ingredient(admin: AdminUser, db: DbSession, ingredient_id: int = Path(..., ge=1)):
    """Remove an ingredient that no recipe uses (admin only)"""
    await ingredient_service.delete_ingredient(db, ingredient_id)
    return ApiResponse(message="Ingredient deleted successfully")
