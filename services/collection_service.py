"""
RecipeShare Collection Service
User-curated recipe lists, private by default
"""

from typing import List, Optional, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import run_in_transaction
from core.exceptions import ConflictError, ForbiddenError, NotFoundError
from middleware.logging import log_business_event
from models.community_models import Collection, CollectionRecipe
from models.recipe_models import Recipe
from models.user import User
from schemas.community_schemas import CollectionCreate, CollectionUpdate
from services.recipe_service import can_view


class CollectionService:

    async def _count_recipes(self, db: AsyncSession, collection_ids: List[int]) -> dict:
        if not collection_ids:
            return {}
        result = await db.execute(
            select(CollectionRecipe.collection_id, func.count(CollectionRecipe.id))
            .where(CollectionRecipe.collection_id.in_(collection_ids))
            .group_by(CollectionRecipe.collection_id)
        )
        return dict(result.all())

    async def with_counts(self, db: AsyncSession, collections: List[Collection]) -> List[Tuple[Collection, int]]:
        counts = await self._count_recipes(db, [collection.id for collection in collections])
        return [(collection, counts.get(collection.id, 0)) for collection in collections]

    async def _get(self, db: AsyncSession, collection_id: int) -> Collection:
        collection = await db.get(Collection, collection_id)
        if collection is None:
            raise NotFoundError("Collection", collection_id)
        return collection

    async def get_visible(self, db: AsyncSession, collection_id: int, viewer: Optional[User]) -> Collection:
        """Private collections are only visible to their owner and admins"""
        collection = await self._get(db, collection_id)
        if not collection.is_public:
            if viewer is None or (viewer.id != collection.owner_id and not viewer.is_admin):
                raise ForbiddenError("This collection is private")
        return collection

    async def get_owned(self, db: AsyncSession, collection_id: int, user: User) -> Collection:
        collection = await self._get(db, collection_id)
        if collection.owner_id != user.id:
            raise ForbiddenError("You can only modify your own collections")
        return collection

    async def recipe_count(self, db: AsyncSession, collection_id: int) -> int:
        return (await self._count_recipes(db, [collection_id])).get(collection_id, 0)

    async def create_collection(self, db: AsyncSession, owner: User, data: CollectionCreate) -> Collection:
        collection = Collection(owner_id=owner.id, **data.model_dump())
        async with run_in_transaction(db):
            db.add(collection)
            await db.flush()

        log_business_event("collection_created", {"collection_id": collection.id, "is_public": collection.is_public})
        return await self._reload(db, collection.id)

    async def list_own(self, db: AsyncSession, owner: User, offset: int, limit: int) -> Tuple[List[Collection], int]:
        condition = Collection.owner_id == owner.id
        total = await db.scalar(select(func.count(Collection.id)).where(condition))
        result = await db.execute(
            select(Collection).where(condition)
            .order_by(Collection.created_at.desc(), Collection.id.desc())
            .offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def list_public(self, db: AsyncSession, offset: int, limit: int) -> Tuple[List[Collection], int]:
        condition = Collection.is_public.is_(True)
        total = await db.scalar(select(func.count(Collection.id)).where(condition))
        result = await db.execute(
            select(Collection).where(condition)
            .order_by(Collection.created_at.desc(), Collection.id.desc())
            .offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def update_collection(
        self, db: AsyncSession, collection_id: int, user: User, data: CollectionUpdate
    ) -> Collection:
        collection = await self.get_owned(db, collection_id, user)

        async with run_in_transaction(db):
            for field, value in data.model_dump(exclude_unset=True).items():
                if value is None and field != "description":
                    continue
                setattr(collection, field, value)

        return await self._reload(db, collection_id)

    async def delete_collection(self, db: AsyncSession, collection_id: int, user: User) -> None:
        collection = await self.get_owned(db, collection_id, user)

        async with run_in_transaction(db):
            await db.delete(collection)

        log_business_event("collection_deleted", {"collection_id": collection_id})

    async def add_recipe(self, db: AsyncSession, collection_id: int, user: User, recipe_id: int) -> None:
        await self.get_owned(db, collection_id, user)

        recipe = await db.get(Recipe, recipe_id)
        if recipe is None or not can_view(recipe, user):
            raise NotFoundError("Recipe", recipe_id)

        existing = await db.scalar(
            select(CollectionRecipe.id).where(
                CollectionRecipe.collection_id == collection_id,
                CollectionRecipe.recipe_id == recipe_id,
            )
        )
        if existing is not None:
            raise ConflictError("Recipe is already in this collection")

        next_order = await db.scalar(
            select(func.coalesce(func.max(CollectionRecipe.display_order) + 1, 0))
            .where(CollectionRecipe.collection_id == collection_id)
        )

        async with run_in_transaction(db):
            db.add(CollectionRecipe(collection_id=collection_id, recipe_id=recipe_id, display_order=next_order))

        log_business_event("collection_recipe_added", {"collection_id": collection_id, "recipe_id": recipe_id})

    async def remove_recipe(self, db: AsyncSession, collection_id: int, user: User, recipe_id: int) -> None:
        await self.get_owned(db, collection_id, user)

        result = await db.execute(
            select(CollectionRecipe).where(
                CollectionRecipe.collection_id == collection_id,
                CollectionRecipe.recipe_id == recipe_id,
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError("Collection entry", recipe_id)

        async with run_in_transaction(db):
            await db.delete(entry)

        log_business_event("collection_recipe_removed", {"collection_id": collection_id, "recipe_id": recipe_id})

    async def list_recipes(
        self, db: AsyncSession, collection_id: int, viewer: Optional[User]
    ) -> Tuple[Collection, List[Recipe]]:
        """
        Recipes of a collection by display order, then insertion time.

        Unpublished entries are left out unless the viewer wrote them or is
        an admin.
        """
        collection = await self.get_visible(db, collection_id, viewer)
        stmt = (
            select(Recipe)
            .join(CollectionRecipe, CollectionRecipe.recipe_id == Recipe.id)
            .where(CollectionRecipe.collection_id == collection_id)
            .order_by(CollectionRecipe.display_order, CollectionRecipe.added_at, CollectionRecipe.id)
        )
        if viewer is None:
            stmt = stmt.where(Recipe.is_published.is_(True))
        elif not viewer.is_admin:
            stmt = stmt.where(or_(Recipe.is_published.is_(True), Recipe.author_id == viewer.id))

        result = await db.execute(stmt)
        return collection, list(result.scalars().all())

    async def _reload(self, db: AsyncSession, collection_id: int) -> Collection:
        result = await db.execute(
            select(Collection).where(Collection.id == collection_id).execution_options(populate_existing=True)
        )
        return result.scalar_one()


collection_service = CollectionService()
