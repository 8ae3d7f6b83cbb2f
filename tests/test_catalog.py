"""Ingredient and category catalog endpoints"""

from conftest import create_recipe

INGREDIENTS = "/api/v1/ingredients"
CATEGORIES = "/api/v1/categories"


async def test_ingredient_crud(client, alice, admin):
    created = await client.post(
        f"{INGREDIENTS}/",
        json={"name": "  Saffron ", "unit": "g", "is_vegan": True},
        headers=alice["headers"],
    )
    assert created.status_code == 201
    ingredient = created.json()["data"]
    assert ingredient["name"] == "Saffron"
    assert ingredient["is_vegan"] is True

    duplicate = await client.post(f"{INGREDIENTS}/", json={"name": "Saffron"}, headers=alice["headers"])
    assert duplicate.status_code == 409

    url = f"{INGREDIENTS}/{ingredient['id']}"
    assert (await client.put(url, json={"unit": "mg"}, headers=alice["headers"])).status_code == 403

    updated = await client.put(url, json={"unit": "mg", "allergen_info": None}, headers=admin["headers"])
    assert updated.status_code == 200
    assert updated.json()["data"]["unit"] == "mg"

    assert (await client.delete(url, headers=admin["headers"])).status_code == 200
    assert (await client.get(url)).status_code == 404


async def test_ingredient_in_use_cannot_be_deleted(client, alice, admin):
    recipe = await create_recipe(client, alice)
    carrot_id = recipe["ingredients"][0]["ingredient_id"]

    response = await client.delete(f"{INGREDIENTS}/{carrot_id}", headers=admin["headers"])

    assert response.status_code == 409
    assert (await client.get(f"{INGREDIENTS}/{carrot_id}")).status_code == 200


async def test_recipe_can_reference_catalog_ingredient_by_id(client, alice):
    created = await client.post(f"{INGREDIENTS}/", json={"name": "Rice"}, headers=alice["headers"])
    rice_id = created.json()["data"]["id"]

    recipe = await create_recipe(client, alice, "Risotto", ingredients=[
        {"ingredient_id": rice_id, "quantity": 300, "unit": "g"},
    ])

    assert recipe["ingredients"][0]["name"] == "Rice"

    listing = (await client.get(f"{INGREDIENTS}/")).json()
    assert listing["meta"]["total"] == 1

    found = (await client.get(f"{INGREDIENTS}/search", params={"query": "ric"})).json()["data"]
    assert [entry["id"] for entry in found] == [rice_id]


async def test_categories_are_admin_managed(client, alice, admin):
    body = {"name": "Dinner", "meal_type": "dinner", "cuisine_type": "French"}

    assert (await client.post(f"{CATEGORIES}/", json=body, headers=alice["headers"])).status_code == 403

    created = await client.post(f"{CATEGORIES}/", json=body, headers=admin["headers"])
    assert created.status_code == 201
    category = created.json()["data"]

    recipe = await create_recipe(client, alice, "Cassoulet", category_ids=[category["id"], category["id"]])
    assert recipe["categories"] == [{"id": category["id"], "name": "Dinner"}]

    in_category = (await client.get(f"{CATEGORIES}/{category['id']}/recipes")).json()
    assert [entry["id"] for entry in in_category["data"]] == [recipe["id"]]

    filtered = (await client.get("/api/v1/recipes/", params={"category_id": category["id"]})).json()
    assert filtered["meta"]["total"] == 1


async def test_inactive_categories_are_not_listed(client, admin):
    created = await client.post(f"{CATEGORIES}/", json={"name": "Brunch"}, headers=admin["headers"])
    category_id = created.json()["data"]["id"]

    response = await client.put(
        f"{CATEGORIES}/{category_id}", json={"is_active": False}, headers=admin["headers"]
    )
    assert response.status_code == 200

    listing = (await client.get(f"{CATEGORIES}/")).json()["data"]
    assert listing == []


async def test_unknown_category_on_recipe_is_a_conflict(client, alice):
    response = await client.post(
        "/api/v1/recipes/",
        json={"name": "Orphan", "ingredients": [], "instructions": [], "category_ids": [77]},
        headers=alice["headers"],
    )

    assert response.status_code == 409
    assert response.json()["details"] == {"category_ids": [77]}
