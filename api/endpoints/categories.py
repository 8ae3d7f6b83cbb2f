"""
RecipeShare Category Endpoints
Category browsing and admin management
"""

from fastapi import APIRouter, Path, status
from typing import List

from core.dependencies import AdminUser, DbSession, PaginationParams
from schemas.common_schemas import ApiResponse, PaginationMeta
from schemas.recipe_schemas import CategoryCreate, CategoryOut, CategoryUpdate, RecipeSummary
from services.category_service import category_service

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[CategoryOut]])
async def list_categories(db: DbSession):
    """Active categories by name"""
    categories = await category_service.list_active(db)
    return ApiResponse(
        message="Categories retrieved successfully",
        data=[CategoryOut.model_validate(category) for category in categories],
    )


@router.get("/{category_id}", response_model=ApiResponse[CategoryOut])
async def get_category(db: DbSession, category_id: int = Path(..., ge=1)):
    category = await category_service.get_category(db, category_id)
    return ApiResponse(message="Category retrieved successfully", data=CategoryOut.model_validate(category))


@router.get("/{category_id}/recipes", response_model=ApiResponse[List[RecipeSummary]])
async def get_category_recipes(db: DbSession, pagination: PaginationParams, category_id: int = Path(..., ge=1)):
    recipes, total = await category_service.list_category_recipes(
        db, category_id, pagination["offset"], pagination["limit"]
    )
    return ApiResponse(
        message="Recipes retrieved successfully",
        data=[RecipeSummary.model_validate(recipe) for recipe in recipes],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.post("/", response_model=ApiResponse[CategoryOut], status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, admin: AdminUser, db: DbSession):
    category = await category_service.create_category(db, data)
    return ApiResponse(message="Category created successfully", data=CategoryOut.model_validate(category))


@router.put("/{category_id}", response_model=ApiResponse[CategoryOut])
async def update_category(
    data: CategoryUpdate, admin: AdminUser, db: DbSession, category_id: int = Path(..., ge=1)
):
    category = await category_service.update_category(db, category_id, data)
    return ApiResponse(message="Category updated successfully", data=CategoryOut.model_validate(category))


@router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(admin: AdminUser, db: DbSession, category_id: int = Path(..., ge=1)):
    await category_service.delete_category(db, category_id)
    return ApiResponse(message="Category deleted successfully")
