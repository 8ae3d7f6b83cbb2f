"""
RecipeShare User Service
Profiles, per-user listings, activity stats and account removal
"""

from typing import List, Tuple
import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import run_in_transaction
from core.exceptions import ForbiddenError, NotFoundError
from middleware.logging import log_business_event
from models.community_models import Collection, Favorite, Feedback
from models.recipe_models import Recipe
from models.user import User
from schemas.auth_schemas import UserStats, UserUpdate
from services.feedback_service import recompute_recipe_rating

logger = structlog.get_logger()


class UserService:
    nullable_fields = {"bio", "profile_image", "phone", "street", "city", "state"}

    async def get_user(self, db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None or not user.is_active:
            raise NotFoundError("User", user_id)
        return user

    def ensure_self_or_admin(self, user_id: int, current_user: User) -> None:
        if current_user.id != user_id and not current_user.is_admin:
            raise ForbiddenError("You can only access your own account")

    async def update_profile(self, db: AsyncSession, user: User, data: UserUpdate) -> User:
        changes = data.model_dump(exclude_unset=True)

        async with run_in_transaction(db):
            for field, value in changes.items():
                if value is None and field not in self.nullable_fields:
                    continue
                setattr(user, field, value)

        logger.info("Profile updated", user_id=user.id, fields=sorted(changes))
        return user

    async def list_users(self, db: AsyncSession, offset: int, limit: int) -> Tuple[List[User], int]:
        total = await db.scalar(select(func.count(User.id)))
        result = await db.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def list_published_recipes(
        self, db: AsyncSession, user_id: int, offset: int, limit: int
    ) -> Tuple[List[Recipe], int]:
        await self.get_user(db, user_id)

        conditions = (Recipe.author_id == user_id, Recipe.is_published.is_(True))
        total = await db.scalar(select(func.count(Recipe.id)).where(*conditions))
        result = await db.execute(
            select(Recipe).where(*conditions)
            .order_by(Recipe.created_at.desc(), Recipe.id.desc())
            .offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def list_favorites(
        self, db: AsyncSession, user_id: int, current_user: User, offset: int, limit: int
    ) -> Tuple[List[Recipe], int]:
        """Favorited recipes, most recently favorited first"""
        self.ensure_self_or_admin(user_id, current_user)
        await self.get_user(db, user_id)

        total = await db.scalar(select(func.count(Favorite.id)).where(Favorite.user_id == user_id))
        result = await db.execute(
            select(Recipe)
            .join(Favorite, Favorite.recipe_id == Recipe.id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def get_stats(self, db: AsyncSession, user_id: int) -> UserStats:
        await self.get_user(db, user_id)

        recipe_count = await db.scalar(select(func.count(Recipe.id)).where(Recipe.author_id == user_id))
        published_count = await db.scalar(
            select(func.count(Recipe.id)).where(Recipe.author_id == user_id, Recipe.is_published.is_(True))
        )
        feedback_count = await db.scalar(select(func.count(Feedback.id)).where(Feedback.user_id == user_id))
        collection_count = await db.scalar(
            select(func.count(Collection.id)).where(Collection.owner_id == user_id)
        )
        favorite_count = await db.scalar(select(func.count(Favorite.id)).where(Favorite.user_id == user_id))
        average_received = await db.scalar(
            select(func.avg(Feedback.rating))
            .join(Recipe, Recipe.id == Feedback.recipe_id)
            .where(Recipe.author_id == user_id, Feedback.rating.is_not(None))
        )

        return UserStats(
            recipe_count=recipe_count or 0,
            published_recipe_count=published_count or 0,
            feedback_count=feedback_count or 0,
            collection_count=collection_count or 0,
            favorite_count=favorite_count or 0,
            average_rating_received=round(float(average_received), 2) if average_received is not None else 0.0,
        )

    async def delete_user(self, db: AsyncSession, user_id: int, current_user: User) -> None:
        """Remove an account; owned recipes, feedback, collections and favorites cascade"""
        self.ensure_self_or_admin(user_id, current_user)
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        rated_recipe_ids = (await db.execute(
            select(Feedback.recipe_id.distinct())
            .join(Recipe, Recipe.id == Feedback.recipe_id)
            .where(Feedback.user_id == user_id, Recipe.author_id != user_id)
        )).scalars().all()

        async with run_in_transaction(db):
            await db.delete(user)
            await db.flush()
            for recipe_id in rated_recipe_ids:
                await recompute_recipe_rating(db, recipe_id)

        log_business_event("user_deleted", {"user_id": user_id, "deleted_by": current_user.id})


user_service = UserService()
