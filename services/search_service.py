"""
RecipeShare Search Service
Filtered recipe search and quick lookups for ingredients, categories and users
"""

from enum import Enum
from typing import List, Optional, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from models.recipe_models import Category, Difficulty, Ingredient, Recipe, RecipeIngredient, recipe_categories
from models.user import User


class SearchType(str, Enum):
    NAME = "name"
    INGREDIENT = "ingredient"
    BOTH = "both"


class SortBy(str, Enum):
    RATING = "rating"
    DATE = "date"
    VIEWS = "views"
    NAME = "name"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


SORT_COLUMNS = {
    SortBy.RATING: Recipe.average_rating,
    SortBy.DATE: Recipe.created_at,
    SortBy.VIEWS: Recipe.view_count,
    SortBy.NAME: Recipe.name,
}


class SearchService:

    def _recipe_conditions(
        self,
        query: Optional[str],
        search_type: SearchType,
        category_id: Optional[int],
        difficulty: Optional[Difficulty],
        max_prep_time: Optional[int],
        max_cook_time: Optional[int],
        min_rating: Optional[float],
    ) -> list:
        conditions = [Recipe.is_published.is_(True)]

        query = (query or "").strip()
        if query:
            by_name = or_(
                Recipe.name.icontains(query, autoescape=True),
                Recipe.description.icontains(query, autoescape=True),
            )
            by_ingredient = Recipe.id.in_(
                select(RecipeIngredient.recipe_id)
                .join(Ingredient, Ingredient.id == RecipeIngredient.ingredient_id)
                .where(Ingredient.name.icontains(query, autoescape=True))
            )
            if search_type == SearchType.NAME:
                conditions.append(by_name)
            elif search_type == SearchType.INGREDIENT:
                conditions.append(by_ingredient)
            else:
                conditions.append(or_(by_name, by_ingredient))

        if category_id is not None:
            conditions.append(Recipe.id.in_(
                select(recipe_categories.c.recipe_id).where(recipe_categories.c.category_id == category_id)
            ))
        if difficulty is not None:
            conditions.append(Recipe.difficulty == difficulty)
        if max_prep_time is not None:
            conditions.append(Recipe.prep_time <= max_prep_time)
        if max_cook_time is not None:
            conditions.append(Recipe.cook_time <= max_cook_time)
        if min_rating is not None:
            conditions.append(Recipe.average_rating >= min_rating)

        return conditions

    async def search_recipes(
        self,
        db: AsyncSession,
        offset: int,
        limit: int,
        query: Optional[str] = None,
        search_type: SearchType = SearchType.BOTH,
        category_id: Optional[int] = None,
        difficulty: Optional[Difficulty] = None,
        max_prep_time: Optional[int] = None,
        max_cook_time: Optional[int] = None,
        min_rating: Optional[float] = None,
        sort_by: SortBy = SortBy.DATE,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Tuple[List[Recipe], int]:
        """
        Search published recipes.

        Sub-selects keep each recipe to a single row, so the total counts
        distinct recipes matching every filter.
        """
        conditions = self._recipe_conditions(
            query, search_type, category_id, difficulty, max_prep_time, max_cook_time, min_rating
        )

        column = SORT_COLUMNS[sort_by]
        ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()
        tiebreak = Recipe.id.asc() if sort_order == SortOrder.ASC else Recipe.id.desc()

        total = await db.scalar(select(func.count(Recipe.id)).where(*conditions))
        result = await db.execute(
            select(Recipe).where(*conditions).order_by(ordering, tiebreak).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def search_ingredients(self, db: AsyncSession, query: str) -> List[Ingredient]:
        query = (query or "").strip()
        if not query:
            return []
        result = await db.execute(
            select(Ingredient).where(Ingredient.name.icontains(query, autoescape=True))
            .order_by(Ingredient.name).limit(settings.SEARCH_RESULT_LIMIT)
        )
        return list(result.scalars().all())

    async def search_categories(self, db: AsyncSession, query: str) -> List[Category]:
        query = (query or "").strip()
        if not query:
            return []
        result = await db.execute(
            select(Category)
            .where(
                Category.is_active.is_(True),
                or_(
                    Category.name.icontains(query, autoescape=True),
                    Category.meal_type.icontains(query, autoescape=True),
                    Category.cuisine_type.icontains(query, autoescape=True),
                ),
            )
            .order_by(Category.name).limit(settings.SEARCH_RESULT_LIMIT)
        )
        return list(result.scalars().all())

    async def search_users(self, db: AsyncSession, query: str) -> List[User]:
        query = (query or "").strip()
        if not query:
            return []
        result = await db.execute(
            select(User)
            .where(
                User.is_active.is_(True),
                or_(
                    User.first_name.icontains(query, autoescape=True),
                    User.last_name.icontains(query, autoescape=True),
                ),
            )
            .order_by(User.first_name, User.last_name).limit(settings.SEARCH_RESULT_LIMIT)
        )
        return list(result.scalars().all())


search_service = SearchService()
