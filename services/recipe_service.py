"""
RecipeShare Recipe Service
Transactional recipe authoring (create / full-replace update), reads, publishing and favorites
"""

from typing import List, Optional, Sequence, Tuple
import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from core.config import settings
from core.database import run_in_transaction
from core.exceptions import ConflictError, ForbiddenError, NotFoundError
from middleware.logging import log_business_event
from models.community_models import Favorite, Feedback
from models.recipe_models import Category, Difficulty, Recipe, RecipeIngredient, RecipeInstruction, recipe_categories
from models.user import User
from schemas.recipe_schemas import RecipeCreate
from services.ingredient_service import ingredient_exists, resolve_ingredient_id

logger = structlog.get_logger()

HEADER_FIELDS = (
    "name", "description", "prep_time", "cook_time", "servings",
    "difficulty", "image_url", "is_published",
)


def can_modify(recipe: Recipe, user: User) -> bool:
    return recipe.author_id == user.id or user.is_admin


def can_view(recipe: Recipe, user: Optional[User]) -> bool:
    if recipe.is_published:
        return True
    return user is not None and can_modify(recipe, user)


class RecipeService:
    """Recipe authoring and reads"""

    async def _load(self, db: AsyncSession, recipe_id: int, refresh: bool = False) -> Optional[Recipe]:
        stmt = select(Recipe).where(Recipe.id == recipe_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_recipe_or_404(self, db: AsyncSession, recipe_id: int) -> Recipe:
        recipe = await self._load(db, recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        return recipe

    async def get_owned_recipe(self, db: AsyncSession, recipe_id: int, user: User) -> Recipe:
        """Load a recipe the caller may modify; not-found and forbidden are raised before any write"""
        recipe = await self.get_recipe_or_404(db, recipe_id)
        if not can_modify(recipe, user):
            logger.warning("Recipe modification forbidden", recipe_id=recipe_id, user_id=user.id)
            raise ForbiddenError("You can only modify your own recipes")
        return recipe

    async def _resolve_ingredient_ids(self, db: AsyncSession, payload: RecipeCreate) -> List[int]:
        ingredient_ids = []
        for position, entry in enumerate(payload.ingredients):
            if entry.ingredient_id is not None:
                if not await ingredient_exists(db, entry.ingredient_id):
                    raise ConflictError(
                        f"Ingredient {entry.ingredient_id} does not exist",
                        {"field": f"ingredients.{position}.ingredient_id"},
                    )
                ingredient_ids.append(entry.ingredient_id)
            else:
                ingredient_ids.append(await resolve_ingredient_id(db, entry.name, entry.unit))
        return ingredient_ids

    async def _load_categories(self, db: AsyncSession, category_ids: Sequence[int]) -> List[Category]:
        if not category_ids:
            return []

        result = await db.execute(select(Category).where(Category.id.in_(category_ids)))
        found = {category.id: category for category in result.scalars().all()}

        missing = [category_id for category_id in category_ids if category_id not in found]
        if missing:
            raise ConflictError("Referenced categories do not exist", {"category_ids": missing})

        return [found[category_id] for category_id in category_ids]

    async def _write_children(self, db: AsyncSession, recipe: Recipe, payload: RecipeCreate) -> None:
        """
        Insert association, instruction and category rows for a recipe whose
        header is already flushed and whose child collections are empty.
        """
        ingredient_ids = await self._resolve_ingredient_ids(db, payload)

        for position, (entry, ingredient_id) in enumerate(zip(payload.ingredients, ingredient_ids)):
            recipe.ingredients.append(RecipeIngredient(
                ingredient_id=ingredient_id,
                quantity=entry.quantity,
                unit=entry.unit,
                notes=entry.notes,
                display_order=position,
            ))

        for position, text in enumerate(payload.instructions):
            recipe.instructions.append(RecipeInstruction(step_number=position + 1, text=text))

        recipe.categories.extend(await self._load_categories(db, payload.category_ids))

        await db.flush()

    async def create_recipe(self, db: AsyncSession, author: User, payload: RecipeCreate) -> Recipe:
        """Create a recipe and all of its child rows in one transaction"""
        recipe = Recipe(
            author_id=author.id,
            ingredients=[],
            instructions=[],
            categories=[],
            **{field: getattr(payload, field) for field in HEADER_FIELDS},
        )

        async with run_in_transaction(db):
            db.add(recipe)
            await db.flush()
            await self._write_children(db, recipe, payload)

        log_business_event("recipe_created", {
            "recipe_id": recipe.id,
            "author_id": author.id,
            "ingredient_count": len(payload.ingredients),
            "instruction_count": len(payload.instructions),
        })
        return await self._load(db, recipe.id, refresh=True)

    async def update_recipe(self, db: AsyncSession, recipe_id: int, user: User, payload: RecipeCreate) -> Recipe:
        """Overwrite the header and replace every child row with the submitted set"""
        recipe = await self.get_owned_recipe(db, recipe_id, user)

        async with run_in_transaction(db):
            for field in HEADER_FIELDS:
                setattr(recipe, field, getattr(payload, field))

            recipe.ingredients.clear()
            recipe.instructions.clear()
            recipe.categories.clear()
            await db.flush()

            await self._write_children(db, recipe, payload)

        log_business_event("recipe_updated", {
            "recipe_id": recipe_id,
            "user_id": user.id,
            "ingredient_count": len(payload.ingredients),
            "instruction_count": len(payload.instructions),
        })
        return await self._load(db, recipe_id, refresh=True)

    async def delete_recipe(self, db: AsyncSession, recipe_id: int, user: User) -> None:
        recipe = await self.get_owned_recipe(db, recipe_id, user)

        async with run_in_transaction(db):
            await db.delete(recipe)

        log_business_event("recipe_deleted", {"recipe_id": recipe_id, "user_id": user.id})

    async def toggle_publish(self, db: AsyncSession, recipe_id: int, user: User) -> Recipe:
        recipe = await self.get_recipe_or_404(db, recipe_id)
        if recipe.author_id != user.id:
            raise ForbiddenError("Only the author can publish or unpublish a recipe")

        async with run_in_transaction(db):
            recipe.is_published = not recipe.is_published

        log_business_event("recipe_publish_toggled", {"recipe_id": recipe_id, "is_published": recipe.is_published})
        return recipe

    async def get_recipe_detail(
        self, db: AsyncSession, recipe_id: int, viewer: Optional[User]
    ) -> Tuple[Recipe, bool, List[Feedback]]:
        """
        Load a recipe for display and count the view.

        Unpublished recipes are reported as missing to everyone except
        their author and admins.
        """
        recipe = await self._load(db, recipe_id)
        if recipe is None or not can_view(recipe, viewer):
            raise NotFoundError("Recipe", recipe_id)

        async with run_in_transaction(db):
            # updated_at is pinned so that views do not count as edits
            await db.execute(
                update(Recipe)
                .where(Recipe.id == recipe_id)
                .values(view_count=Recipe.view_count + 1, updated_at=Recipe.updated_at)
                .execution_options(synchronize_session=False)
            )
        set_committed_value(recipe, "view_count", recipe.view_count + 1)

        feedback = await db.execute(
            select(Feedback)
            .where(Feedback.recipe_id == recipe_id, Feedback.is_flagged.is_(False))
            .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        )

        is_favorited = False
        if viewer is not None:
            is_favorited = await self.is_favorited(db, recipe_id, viewer.id)

        return recipe, is_favorited, list(feedback.scalars().all())

    async def list_recipes(
        self,
        db: AsyncSession,
        offset: int,
        limit: int,
        difficulty: Optional[Difficulty] = None,
        category_id: Optional[int] = None,
    ) -> Tuple[List[Recipe], int]:
        """Published recipes, newest first"""
        conditions = [Recipe.is_published.is_(True)]
        if difficulty is not None:
            conditions.append(Recipe.difficulty == difficulty)
        if category_id is not None:
            conditions.append(Recipe.id.in_(
                select(recipe_categories.c.recipe_id).where(recipe_categories.c.category_id == category_id)
            ))

        total = await db.scalar(select(func.count(Recipe.id)).where(*conditions))
        result = await db.execute(
            select(Recipe)
            .where(*conditions)
            .order_by(Recipe.created_at.desc(), Recipe.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def popular_recipes(self, db: AsyncSession, limit: int = None) -> List[Recipe]:
        result = await db.execute(
            select(Recipe)
            .where(Recipe.is_published.is_(True))
            .order_by(
                Recipe.average_rating.desc(),
                Recipe.total_ratings.desc(),
                Recipe.view_count.desc(),
                Recipe.id.desc(),
            )
            .limit(limit or settings.DEFAULT_PAGE_SIZE)
        )
        return list(result.scalars().all())

    async def recent_recipes(self, db: AsyncSession, limit: int = None) -> List[Recipe]:
        result = await db.execute(
            select(Recipe)
            .where(Recipe.is_published.is_(True))
            .order_by(Recipe.created_at.desc(), Recipe.id.desc())
            .limit(limit or settings.DEFAULT_PAGE_SIZE)
        )
        return list(result.scalars().all())

    async def is_favorited(self, db: AsyncSession, recipe_id: int, user_id: int) -> bool:
        result = await db.execute(
            select(Favorite.id).where(Favorite.recipe_id == recipe_id, Favorite.user_id == user_id)
        )
        return result.scalar_one_or_none() is not None

    async def add_favorite(self, db: AsyncSession, recipe_id: int, user: User) -> None:
        recipe = await self._load(db, recipe_id)
        if recipe is None or not can_view(recipe, user):
            raise NotFoundError("Recipe", recipe_id)

        if await self.is_favorited(db, recipe_id, user.id):
            raise ConflictError("Recipe is already in favorites")

        async with run_in_transaction(db):
            db.add(Favorite(user_id=user.id, recipe_id=recipe_id))

        log_business_event("recipe_favorited", {"recipe_id": recipe_id, "user_id": user.id})

    async def remove_favorite(self, db: AsyncSession, recipe_id: int, user: User) -> None:
        result = await db.execute(
            select(Favorite).where(Favorite.recipe_id == recipe_id, Favorite.user_id == user.id)
        )
        favorite = result.scalar_one_or_none()
        if favorite is None:
            raise NotFoundError("Favorite", recipe_id)

        async with run_in_transaction(db):
            await db.delete(favorite)

        log_business_event("recipe_unfavorited", {"recipe_id": recipe_id, "user_id": user.id})


recipe_service = RecipeService()
