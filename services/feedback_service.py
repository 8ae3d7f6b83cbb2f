"""
RecipeShare Feedback Service
Ratings and comments, with the recipe's aggregate rating kept in step
"""

from typing import List, Optional, Tuple
import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import run_in_transaction
from core.exceptions import ForbiddenError, NotFoundError
from middleware.logging import log_business_event
from models.community_models import Feedback
from models.recipe_models import Recipe
from models.user import User
from schemas.community_schemas import FeedbackCreate, FeedbackUpdate
from services.recipe_service import can_view

logger = structlog.get_logger()


async def recompute_recipe_rating(db: AsyncSession, recipe_id: int) -> None:
    """Refresh a recipe's average_rating/total_ratings from its rated feedback rows"""
    await db.flush()
    row = (await db.execute(
        select(func.avg(Feedback.rating), func.count(Feedback.rating))
        .where(Feedback.recipe_id == recipe_id, Feedback.rating.is_not(None))
    )).one()

    average, count = row
    recipe = await db.get(Recipe, recipe_id)
    if recipe is None:
        return

    recipe.average_rating = round(float(average), 2) if average is not None else 0.0
    recipe.total_ratings = count or 0


class FeedbackService:

    async def get_feedback(self, db: AsyncSession, feedback_id: int) -> Feedback:
        feedback = await db.get(Feedback, feedback_id)
        if feedback is None:
            raise NotFoundError("Feedback", feedback_id)
        return feedback

    async def create_feedback(self, db: AsyncSession, user: User, data: FeedbackCreate) -> Feedback:
        recipe = await db.get(Recipe, data.recipe_id)
        if recipe is None or not can_view(recipe, user):
            raise NotFoundError("Recipe", data.recipe_id)

        feedback = Feedback(
            user_id=user.id,
            recipe_id=data.recipe_id,
            rating=data.rating,
            comment_text=data.comment_text,
        )

        async with run_in_transaction(db):
            db.add(feedback)
            await recompute_recipe_rating(db, data.recipe_id)

        log_business_event("feedback_created", {
            "feedback_id": feedback.id,
            "recipe_id": data.recipe_id,
            "rating": data.rating,
        })
        return await self._reload(db, feedback.id)

    async def update_feedback(
        self, db: AsyncSession, feedback_id: int, user: User, data: FeedbackUpdate
    ) -> Feedback:
        feedback = await self.get_feedback(db, feedback_id)
        if feedback.user_id != user.id:
            raise ForbiddenError("You can only edit your own feedback")

        async with run_in_transaction(db):
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(feedback, field, value)
            await recompute_recipe_rating(db, feedback.recipe_id)

        log_business_event("feedback_updated", {"feedback_id": feedback_id, "recipe_id": feedback.recipe_id})
        return await self._reload(db, feedback_id)

    async def delete_feedback(self, db: AsyncSession, feedback_id: int, user: User) -> None:
        feedback = await self.get_feedback(db, feedback_id)
        if feedback.user_id != user.id and not user.is_admin:
            raise ForbiddenError("You can only delete your own feedback")

        recipe_id = feedback.recipe_id
        async with run_in_transaction(db):
            await db.delete(feedback)
            await recompute_recipe_rating(db, recipe_id)

        log_business_event("feedback_deleted", {"feedback_id": feedback_id, "recipe_id": recipe_id})

    async def mark_helpful(self, db: AsyncSession, feedback_id: int) -> Feedback:
        feedback = await self.get_feedback(db, feedback_id)
        async with run_in_transaction(db):
            feedback.helpful_count = feedback.helpful_count + 1
        return await self._reload(db, feedback_id)

    async def flag(self, db: AsyncSession, feedback_id: int, user: User) -> Feedback:
        feedback = await self.get_feedback(db, feedback_id)
        async with run_in_transaction(db):
            feedback.is_flagged = True

        logger.info("Feedback flagged", feedback_id=feedback_id, flagged_by=user.id)
        return await self._reload(db, feedback_id)

    async def list_for_recipe(
        self, db: AsyncSession, recipe_id: int, viewer: Optional[User], offset: int, limit: int
    ) -> Tuple[List[Feedback], int]:
        """Unflagged feedback for a recipe, newest first"""
        recipe = await db.get(Recipe, recipe_id)
        if recipe is None or not can_view(recipe, viewer):
            raise NotFoundError("Recipe", recipe_id)

        conditions = (Feedback.recipe_id == recipe_id, Feedback.is_flagged.is_(False))
        total = await db.scalar(select(func.count(Feedback.id)).where(*conditions))
        result = await db.execute(
            select(Feedback)
            .where(*conditions)
            .order_by(Feedback.created_at.desc(), Feedback.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def list_for_user(
        self, db: AsyncSession, user_id: int, offset: int, limit: int
    ) -> Tuple[List[Feedback], int]:
        conditions = (Feedback.user_id == user_id,)
        total = await db.scalar(select(func.count(Feedback.id)).where(*conditions))
        result = await db.execute(
            select(Feedback)
            .where(*conditions)
            .order_by(Feedback.created_at.desc(), Feedback.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def _reload(self, db: AsyncSession, feedback_id: int) -> Feedback:
        result = await db.execute(
            select(Feedback).where(Feedback.id == feedback_id).execution_options(populate_existing=True)
        )
        return result.scalar_one()


feedback_service = FeedbackService()
