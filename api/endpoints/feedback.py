"""
RecipeShare Feedback Endpoints
Ratings and comments on recipes
"""

from fastapi import APIRouter, Path, status
from typing import List

from core.dependencies import CurrentUser, DbSession, OptionalUser, PaginationParams
from schemas.common_schemas import ApiResponse, PaginationMeta
from schemas.community_schemas import FeedbackCreate, FeedbackOut, FeedbackUpdate
from services.feedback_service import feedback_service

router = APIRouter()


@router.post("/", response_model=ApiResponse[FeedbackOut], status_code=status.HTTP_201_CREATED)
async def create_feedback(data: FeedbackCreate, current_user: CurrentUser, db: DbSession):
    """
    Rate and/or comment on a recipe

    The recipe's average rating and rating count are refreshed in the
    same transaction.
    """
    feedback = await feedback_service.create_feedback(db, current_user, data)
    return ApiResponse(message="Feedback submitted successfully", data=FeedbackOut.model_validate(feedback))


@router.get("/recipe/{recipe_id}", response_model=ApiResponse[List[FeedbackOut]])
async def get_recipe_feedback(
    viewer: OptionalUser, db: DbSession, pagination: PaginationParams, recipe_id: int = Path(..., ge=1)
):
    """Unflagged feedback for a recipe, newest first"""
    entries, total = await feedback_service.list_for_recipe(
        db, recipe_id, viewer, pagination["offset"], pagination["limit"]
    )
    return ApiResponse(
        message="Feedback retrieved successfully",
        data=[FeedbackOut.model_validate(entry) for entry in entries],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/user/{user_id}", response_model=ApiResponse[List[FeedbackOut]])
async def get_user_feedback(db: DbSession, pagination: PaginationParams, user_id: int = Path(..., ge=1)):
    entries, total = await feedback_service.list_for_user(
        db, user_id, pagination["offset"], pagination["limit"]
    )
    return ApiResponse(
        message="Feedback retrieved successfully",
        data=[FeedbackOut.model_validate(entry) for entry in entries],
        meta=PaginationMeta.build(pagination["page"], pagination["limit"], total),
    )


@router.get("/{feedback_id}", response_model=ApiResponse[FeedbackOut])
async def get_feedback(db: DbSession, feedback_id: int = Path(..., ge=1)):
    feedback = await feedback_service.get_feedback(db, feedback_id)
    return ApiResponse(message="Feedback retrieved successfully", data=FeedbackOut.model_validate(feedback))


@router.put("/{feedback_id}", response_model=ApiResponse[FeedbackOut])
async def update_feedback(
    data: FeedbackUpdate, current_user: CurrentUser, db: DbSession, feedback_id: int = Path(..., ge=1)
):
    """Edit own feedback"""
    feedback = await feedback_service.update_feedback(db, feedback_id, current_user, data)
    return ApiResponse(message="Feedback updated successfully", data=FeedbackOut.model_validate(feedback))


@router.delete("/{feedback_id}", response_model=ApiResponse[None])
async def delete_feedback(current_user: CurrentUser, db: DbSession, feedback_id: int = Path(..., ge=1)):
    """Delete own feedback (admins may delete any)"""
    await feedback_service.delete_feedback(db, feedback_id, current_user)
    return ApiResponse(message="Feedback deleted successfully")


@router.post("/{feedback_id}/helpful", response_model=ApiResponse[FeedbackOut])
async def mark_helpful(current_user: CurrentUser, db: DbSession, feedback_id: int = Path(..., ge=1)):
    feedback = await feedback_service.mark_helpful(db, feedback_id)
    return ApiResponse(message="Feedback marked as helpful", data=FeedbackOut.model_validate(feedback))


@router.post("/{feedback_id}/flag", response_model=ApiResponse[FeedbackOut])
async def flag_feedback(current_user: CurrentUser, db: DbSession, feedback_id: int = Path(..., ge=1)):
    """Flag feedback for moderation; flagged entries are hidden from recipe listings"""
    feedback = await feedback_service.flag(db, feedback_id, current_user)
    return ApiResponse(message="Feedback flagged for review", data=FeedbackOut.model_validate(feedback))
