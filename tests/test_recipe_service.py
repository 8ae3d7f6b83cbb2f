"""Recipe authoring at the service layer: atomic writes, full replace and ingredient resolution"""

import importlib

import pytest
from sqlalchemy import func, select

from conftest import create_user
from core.exceptions import ConflictError, ForbiddenError
from models.recipe_models import Ingredient, Recipe, RecipeIngredient, RecipeInstruction
from schemas.recipe_schemas import IngredientCreate, RecipeCreate, RecipeUpdate
from services.ingredient_service import ingredient_service, resolve_ingredient_id
from services.recipe_service import recipe_service

ingredient_module = importlib.import_module("services.ingredient_service")


def build_payload(schema=RecipeCreate, name="Soup", ingredients=None, instructions=None, **extra):
    return schema(
        name=name,
        ingredients=ingredients if ingredients is not None else [
            {"name": "Carrot", "quantity": 2, "unit": "pcs", "notes": "peeled"},
            {"name": "Onion", "quantity": 1, "unit": "pcs"},
        ],
        instructions=instructions if instructions is not None else ["Chop", "Boil"],
        **extra,
    )


async def count(session, column, *conditions):
    return await session.scalar(select(func.count(column)).where(*conditions))


def ingredient_rows(recipe):
    return [
        (row.ingredient_id, row.ingredient.name, row.quantity, row.unit, row.notes, row.display_order)
        for row in recipe.ingredients
    ]


async def test_create_recipe_writes_children_in_order(session):
    author = await create_user(session, "author@example.com")

    recipe = await recipe_service.create_recipe(session, author, build_payload())

    assert recipe.author_id == author.id
    carrot, onion = (row.ingredient_id for row in recipe.ingredients)
    assert ingredient_rows(recipe) == [
        (carrot, "Carrot", 2, "pcs", "peeled", 0),
        (onion, "Onion", 1, "pcs", None, 1),
    ]
    assert [(step.step_number, step.text) for step in recipe.instructions] == [(1, "Chop"), (2, "Boil")]
    assert await count(session, Ingredient.id) == 2


async def test_unknown_ingredient_id_rolls_back_everything(session):
    author = await create_user(session, "author@example.com")
    payload = build_payload(ingredients=[
        {"name": "Salt", "quantity": 1, "unit": "tsp"},
        {"ingredient_id": 9999, "quantity": 1, "unit": "pcs"},
    ])

    with pytest.raises(ConflictError) as exc_info:
        await recipe_service.create_recipe(session, author, payload)

    assert exc_info.value.details["field"] == "ingredients.1.ingredient_id"
    assert await count(session, Recipe.id) == 0
    assert await count(session, RecipeInstruction.id) == 0
    # the ingredient created for the first line is discarded with the rest
    assert await count(session, Ingredient.id) == 0


async def test_update_replaces_every_child_row(session):
    author = await create_user(session, "author@example.com")
    recipe = await recipe_service.create_recipe(session, author, build_payload())

    updated = await recipe_service.update_recipe(session, recipe.id, author, build_payload(
        RecipeUpdate,
        name="Potato Soup",
        ingredients=[
            {"name": "Leek", "quantity": 1, "unit": "pcs", "notes": "sliced"},
            {"name": "Potato", "quantity": 3, "unit": "pcs"},
        ],
        instructions=["Boil potatoes"],
    ))

    assert updated.name == "Potato Soup"
    leek, potato = (row.ingredient_id for row in updated.ingredients)
    assert ingredient_rows(updated) == [
        (leek, "Leek", 1, "pcs", "sliced", 0),
        (potato, "Potato", 3, "pcs", None, 1),
    ]
    assert [step.text for step in updated.instructions] == ["Boil potatoes"]
    assert await count(session, RecipeIngredient.id, RecipeIngredient.recipe_id == recipe.id) == 2
    assert await count(session, RecipeInstruction.id, RecipeInstruction.recipe_id == recipe.id) == 1
    # replaced catalog entries stay in the catalog
    assert await count(session, Ingredient.id) == 4


async def test_update_by_someone_else_is_forbidden_and_changes_nothing(session):
    author = await create_user(session, "author@example.com")
    stranger = await create_user(session, "stranger@example.com")
    recipe = await recipe_service.create_recipe(session, author, build_payload(
        ingredients=[{"name": "Carrot", "quantity": 2, "unit": "pcs"}],
    ))

    with pytest.raises(ForbiddenError):
        await recipe_service.update_recipe(session, recipe.id, stranger, build_payload(
            RecipeUpdate, name="Hijacked", ingredients=[{"name": "Beet", "quantity": 1, "unit": "pcs"}],
        ))

    reloaded = await recipe_service._load(session, recipe.id, refresh=True)
    assert reloaded.name == "Soup"
    assert [row.ingredient.name for row in reloaded.ingredients] == ["Carrot"]
    assert await count(session, Ingredient.id, Ingredient.name == "Beet") == 0


async def test_admin_may_update_any_recipe(session):
    author = await create_user(session, "author@example.com")
    moderator = await create_user(session, "mod@example.com", admin=True)
    recipe = await recipe_service.create_recipe(session, author, build_payload())

    updated = await recipe_service.update_recipe(
        session, recipe.id, moderator, build_payload(RecipeUpdate, name="Edited")
    )

    assert updated.name == "Edited"
    assert updated.author_id == author.id


async def test_existing_ingredient_is_reused_by_exact_name(session):
    author = await create_user(session, "author@example.com")
    first = await recipe_service.create_recipe(session, author, build_payload(name="One"))
    second = await recipe_service.create_recipe(session, author, build_payload(name="Two"))

    assert first.ingredients[0].ingredient_id == second.ingredients[0].ingredient_id
    assert await count(session, Ingredient.id, Ingredient.name == "Carrot") == 1


async def test_ingredient_names_are_case_sensitive(session):
    author = await create_user(session, "author@example.com")
    recipe = await recipe_service.create_recipe(session, author, build_payload(ingredients=[
        {"name": "Carrot", "quantity": 1, "unit": "pcs"},
        {"name": "carrot", "quantity": 1, "unit": "pcs"},
    ]))

    ids = {row.ingredient_id for row in recipe.ingredients}
    assert len(ids) == 2


async def test_replacing_with_the_same_payload_is_stable(session):
    author = await create_user(session, "author@example.com")
    recipe = await recipe_service.create_recipe(session, author, build_payload())
    payload = build_payload(RecipeUpdate, name="Soup v2")

    created_rows = ingredient_rows(recipe)
    first_rows = ingredient_rows(await recipe_service.update_recipe(session, recipe.id, author, payload))
    second_rows = ingredient_rows(await recipe_service.update_recipe(session, recipe.id, author, payload))

    assert first_rows == second_rows == created_rows
    assert [row[3] for row in second_rows] == ["peeled", None]
    assert await count(session, Ingredient.id) == 2
    assert await count(session, RecipeIngredient.id) == 2


async def test_lost_insert_race_reuses_the_winning_row(session, monkeypatch):
    author = await create_user(session, "author@example.com")
    salt = await ingredient_service.create_ingredient(session, IngredientCreate(name="Salt"))

    original_lookup = ingredient_module.find_ingredient_id
    calls = []

    async def lookup_that_misses_once(db, name):
        calls.append(name)
        if len(calls) == 1:
            # another writer commits "Salt" between our lookup and our insert
            return None
        return await original_lookup(db, name)

    monkeypatch.setattr(ingredient_module, "find_ingredient_id", lookup_that_misses_once)

    recipe = await recipe_service.create_recipe(session, author, build_payload(
        ingredients=[{"name": "Salt", "quantity": 1, "unit": "tsp"}],
    ))

    assert recipe.ingredients[0].ingredient_id == salt.id
    assert len(calls) == 2
    assert await count(session, Ingredient.id, Ingredient.name == "Salt") == 1


async def test_resolve_ingredient_id_creates_missing_names(session):
    async with session.begin():
        created = await resolve_ingredient_id(session, "Basil", "leaves")
        again = await resolve_ingredient_id(session, "Basil")

    assert created == again
    ingredient = await session.get(Ingredient, created)
    assert ingredient.unit == "leaves"
