"""
RecipeShare Collection Endpoints
User-curated recipe collections
"""

from fastapi import APIRouter, Path, status
from typing import List

from core.dependencies import CurrentUser, DbSession, OptionalUser, PaginationParams
from schemas.common_schemas import ApiResponse, PaginationMeta
from schemas.community_schemas import (
    CollectionCreate, CollectionDetail, CollectionOut, CollectionRecipeAdd, CollectionUpdate
)
from schemas.recipe_schemas import RecipeSummary
from services.collection_service import collection_service

router = APIRouter()


@router.post("/", response_model=ApiResponse[CollectionOut], status_code=status.HTTP_201_CREATED)
async def create_collection(data: CollectionCreate, current_user: CurrentUser, db: DbSession):
    collection = await collection_service.create_collection(db, current_user, data)
    return ApiResponse(
        message="Collection created successfully",
        data=CollectionOut.from_collection(collection, 0),
    )


@router.get("/", response_model=ApiResponse[List[CollectionOut]])
async def list_own_collections(current_user: CurrentUser, db: DbSession, pagination: PaginationParams):
    """Caller's collections with recipe counts"""
    collections, total = await collection_service.list_own(
        db, current_user, pagination["offset"], pagination["limit"]
    )
    counted = await collection_service.with_counts(db, collections)
    return ApiResponse(
        message="Collections retrieved successfully",
        data=[CollectionOut.from_collection(collection, count) for collection, count in counted],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/public", response_model=ApiResponse[List[CollectionOut]])
async def list_public_collections(db: DbSession, pagination: PaginationParams):
    collections, total = await collection_service.list_public(db, pagination["offset"], pagination["limit"])
    counted = await collection_service.with_counts(db, collections)
    return ApiResponse(
        message="Public collections retrieved successfully",
        data=[CollectionOut.from_collection(collection, count) for collection, count in counted],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/{collection_id}", response_model=ApiResponse[CollectionDetail])
async def get_collection(viewer: OptionalUser, db: DbSession, collection_id: int = Path(..., ge=1)):
    """A collection and its recipes; private collections are owner-only"""
    collection, recipes = await collection_service.list_recipes(db, collection_id, viewer)
    summary = CollectionOut.from_collection(collection, len(recipes))
    return ApiResponse(
        message="Collection retrieved successfully",
        data=CollectionDetail(
            **summary.model_dump(exclude={"owner"}),
            owner=summary.owner,
            recipes=[RecipeSummary.model_validate(recipe) for recipe in recipes],
        ),
    )


@router.put("/{collection_id}", response_model=ApiResponse[CollectionOut])
async def update_collection(
    data: CollectionUpdate, current_user: CurrentUser, db: DbSession, collection_id: int = Path(..., ge=1)
):
    collection = await collection_service.update_collection(db, collection_id, current_user, data)
    count = await collection_service.recipe_count(db, collection_id)
    return ApiResponse(
        message="Collection updated successfully",
        data=CollectionOut.from_collection(collection, count),
    )


@router.delete("/{collection_id}", response_model=ApiResponse[None])
async def delete_collection(current_user: CurrentUser, db: DbSession, collection_id: int = Path(..., ge=1)):
    await collection_service.delete_collection(db, collection_id, current_user)
    return ApiResponse(message="Collection deleted successfully")


@router.post("/{collection_id}/recipes", response_model=ApiResponse[None], status_code=status.HTTP_201_CREATED)
async def add_recipe_to_collection(
    data: CollectionRecipeAdd, current_user: CurrentUser, db: DbSession, collection_id: int = Path(..., ge=1)
):
    await collection_service.add_recipe(db, collection_id, current_user, data.recipe_id)
    return ApiResponse(message="Recipe added to collection")


@router.delete("/{collection_id}/recipes/{recipe_id}", response_model=ApiResponse[None])
async def remove_recipe_from_collection(
    current_user: CurrentUser,
    db: DbSession,
    collection_id: int = Path(..., ge=1),
    recipe_id: int = Path(..., ge=1),
):
    await collection_service.remove_recipe(db, collection_id, current_user, recipe_id)
    return ApiResponse(message="Recipe removed from collection")


@router.get("/{collection_id}/recipes", response_model=ApiResponse[List[RecipeSummary]])
async def list_collection_recipes(viewer: OptionalUser, db: DbSession, collection_id: int = Path(..., ge=1)):
    """Recipes in display order"""
    _, recipes = await collection_service.list_recipes(db, collection_id, viewer)
    return ApiResponse(
        message="Collection recipes retrieved successfully",
        data=[RecipeSummary.model_validate(recipe) for recipe in recipes],
    )
