"""
RecipeShare Ingredient Service
Ingredient catalog management and name-to-id resolution for recipe authoring
"""

from typing import List, Optional, Tuple
import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import run_in_transaction
from core.exceptions import ConflictError, NotFoundError
from middleware.logging import log_business_event
from models.recipe_models import Ingredient, RecipeIngredient
from schemas.recipe_schemas import IngredientCreate, IngredientUpdate

logger = structlog.get_logger()


async def find_ingredient_id(session: AsyncSession, name: str) -> Optional[int]:
    """Exact, case-sensitive lookup of an ingredient by name"""
    result = await session.execute(select(Ingredient.id).where(Ingredient.name == name))
    return result.scalar_one_or_none()


async def resolve_ingredient_id(session: AsyncSession, name: str, unit: Optional[str] = None) -> int:
    """
    Return the id of the ingredient called ``name``, creating it if needed.

    Runs inside the caller's transaction. The insert happens in a savepoint so
    that losing a race against a concurrent insert of the same name (unique
    violation) only discards the savepoint; the winner's row is then reused.
    """
    ingredient_id = await find_ingredient_id(session, name)
    if ingredient_id is not None:
        return ingredient_id

    try:
        async with session.begin_nested():
            ingredient = Ingredient(name=name, unit=unit)
            session.add(ingredient)
            await session.flush()
    except IntegrityError:
        logger.info("Ingredient inserted concurrently, reusing existing row", name=name)
        ingredient_id = await find_ingredient_id(session, name)
        if ingredient_id is None:
            raise
        return ingredient_id

    logger.debug("Ingredient created during recipe authoring", ingredient_id=ingredient.id, name=name)
    return ingredient.id


async def ingredient_exists(session: AsyncSession, ingredient_id: int) -> bool:
    result = await session.execute(select(Ingredient.id).where(Ingredient.id == ingredient_id))
    return result.scalar_one_or_none() is not None


class IngredientService:
    """Catalog CRUD for ingredients"""

    nullable_fields = {"unit", "calories_per_unit", "allergen_info"}

    async def list_ingredients(self, db: AsyncSession, offset: int, limit: int) -> Tuple[List[Ingredient], int]:
        total = await db.scalar(select(func.count(Ingredient.id)))
        result = await db.execute(
            select(Ingredient).order_by(Ingredient.name).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def search_ingredients(self, db: AsyncSession, query: str) -> List[Ingredient]:
        query = query.strip()
        if not query:
            return []
        result = await db.execute(
            select(Ingredient)
            .where(Ingredient.name.icontains(query, autoescape=True))
            .order_by(Ingredient.name)
            .limit(settings.SEARCH_RESULT_LIMIT)
        )
        return list(result.scalars().all())

    async def get_ingredient(self, db: AsyncSession, ingredient_id: int) -> Ingredient:
        ingredient = await db.get(Ingredient, ingredient_id)
        if ingredient is None:
            raise NotFoundError("Ingredient", ingredient_id)
        return ingredient

    async def create_ingredient(self, db: AsyncSession, data: IngredientCreate) -> Ingredient:
        if await find_ingredient_id(db, data.name) is not None:
            raise ConflictError(f"Ingredient '{data.name}' already exists")

        ingredient = Ingredient(**data.model_dump())
        async with run_in_transaction(db):
            db.add(ingredient)
            await db.flush()

        log_business_event("ingredient_created", {"ingredient_id": ingredient.id, "name": ingredient.name})
        return ingredient

    async def update_ingredient(self, db: AsyncSession, ingredient_id: int, data: IngredientUpdate) -> Ingredient:
        ingredient = await self.get_ingredient(db, ingredient_id)
        changes = {
            field: value for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in self.nullable_fields
        }

        new_name = changes.get("name")
        if new_name and new_name != ingredient.name and await find_ingredient_id(db, new_name) is not None:
            raise ConflictError(f"Ingredient '{new_name}' already exists")

        async with run_in_transaction(db):
            for field, value in changes.items():
                setattr(ingredient, field, value)

        return ingredient

    async def delete_ingredient(self, db: AsyncSession, ingredient_id: int) -> None:
        ingredient = await self.get_ingredient(db, ingredient_id)

        usage = await db.scalar(
            select(func.count(RecipeIngredient.id)).where(RecipeIngredient.ingredient_id == ingredient_id)
        )
        if usage:
            raise ConflictError(
                "Ingredient is used by existing recipes and cannot be deleted",
                {"recipe_ingredient_count": usage},
            )

        async with run_in_transaction(db):
            await db.delete(ingredient)

        log_business_event("ingredient_deleted", {"ingredient_id": ingredient_id})


ingredient_service = IngredientService()
