"""
RecipeShare Category Service
Category management and per-category recipe listings
"""

from typing import List, Tuple
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import run_in_transaction
from core.exceptions import NotFoundError
from middleware.logging import log_business_event
from models.recipe_models import Category, Recipe, recipe_categories
from schemas.recipe_schemas import CategoryCreate, CategoryUpdate


class CategoryService:
    nullable_fields = {"meal_type", "cuisine_type", "description"}

    async def list_active(self, db: AsyncSession) -> List[Category]:
        result = await db.execute(
            select(Category).where(Category.is_active.is_(True)).order_by(Category.name)
        )
        return list(result.scalars().all())

    async def get_category(self, db: AsyncSession, category_id: int) -> Category:
        category = await db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    async def list_category_recipes(
        self, db: AsyncSession, category_id: int, offset: int, limit: int
    ) -> Tuple[List[Recipe], int]:
        """Published recipes in a category, newest first"""
        await self.get_category(db, category_id)

        conditions = (
            Recipe.is_published.is_(True),
            recipe_categories.c.category_id == category_id,
        )
        base = select(Recipe).join(recipe_categories, recipe_categories.c.recipe_id == Recipe.id)

        total = await db.scalar(
            select(func.count(Recipe.id))
            .join(recipe_categories, recipe_categories.c.recipe_id == Recipe.id)
            .where(*conditions)
        )
        result = await db.execute(
            base.where(*conditions)
            .order_by(Recipe.created_at.desc(), Recipe.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def create_category(self, db: AsyncSession, data: CategoryCreate) -> Category:
        category = Category(**data.model_dump())
        async with run_in_transaction(db):
            db.add(category)
            await db.flush()

        log_business_event("category_created", {"category_id": category.id, "name": category.name})
        return category

    async def update_category(self, db: AsyncSession, category_id: int, data: CategoryUpdate) -> Category:
        category = await self.get_category(db, category_id)

        async with run_in_transaction(db):
            for field, value in data.model_dump(exclude_unset=True).items():
                if value is None and field not in self.nullable_fields:
                    continue
                setattr(category, field, value)

        return category

    async def delete_category(self, db: AsyncSession, category_id: int) -> None:
        category = await self.get_category(db, category_id)

        async with run_in_transaction(db):
            await db.delete(category)

        log_business_event("category_deleted", {"category_id": category_id})


category_service = CategoryService()
