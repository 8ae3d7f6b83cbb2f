"""Recipe endpoints over HTTP"""

from conftest import create_recipe, recipe_payload

RECIPES = "/api/v1/recipes"


async def test_create_recipe_returns_full_detail(client, alice):
    data = await create_recipe(client, alice, "Soup", category_ids=[])

    assert data["name"] == "Soup"
    assert data["author"]["id"] == alice["id"]
    assert [
        (line["name"], line["quantity"], line["unit"], line["notes"], line["display_order"])
        for line in data["ingredients"]
    ] == [("Carrot", 2, "pcs", "diced", 0), ("Water", 1, "l", None, 1)]
    assert [step["step_number"] for step in data["instructions"]] == [1, 2]
    assert data["average_rating"] == 0.0
    assert data["is_favorited"] is False


async def test_create_requires_authentication(client):
    response = await client.post(f"{RECIPES}/", json=recipe_payload())

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "unauthorized"


async def test_invalid_payload_reports_field_errors(client, alice):
    response = await client.post(
        f"{RECIPES}/",
        json=recipe_payload(servings=0, instructions=["Stir", "   "]),
        headers=alice["headers"],
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "validation_error"
    fields = {error["field"] for error in body["errors"]}
    assert "servings" in fields
    assert any(field.startswith("instructions") for field in fields)


async def test_unknown_ingredient_id_is_a_conflict(client, alice):
    response = await client.post(
        f"{RECIPES}/",
        json=recipe_payload(ingredients=[{"ingredient_id": 4242, "quantity": 1, "unit": "g"}]),
        headers=alice["headers"],
    )

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"
    assert response.json()["details"] == {"field": "ingredients.0.ingredient_id"}

    listing = await client.get(f"{RECIPES}/")
    assert listing.json()["meta"]["total"] == 0


async def test_ownership_is_enforced_on_update_and_delete(client, alice, bob):
    recipe = await create_recipe(client, alice, "Soup", ingredients=[
        {"name": "Carrot", "quantity": 2, "unit": "pcs"},
    ])

    response = await client.put(
        f"{RECIPES}/{recipe['id']}",
        json=recipe_payload("Bob's Soup", ingredients=[{"name": "Beet", "quantity": 1, "unit": "pcs"}]),
        headers=bob["headers"],
    )
    assert response.status_code == 403

    response = await client.delete(f"{RECIPES}/{recipe['id']}", headers=bob["headers"])
    assert response.status_code == 403

    detail = (await client.get(f"{RECIPES}/{recipe['id']}")).json()["data"]
    assert detail["name"] == "Soup"
    assert [line["name"] for line in detail["ingredients"]] == ["Carrot"]


async def test_admin_can_delete_any_recipe(client, alice, admin):
    recipe = await create_recipe(client, alice)

    response = await client.delete(f"{RECIPES}/{recipe['id']}", headers=admin["headers"])

    assert response.status_code == 200
    assert (await client.get(f"{RECIPES}/{recipe['id']}")).status_code == 404


async def test_put_replaces_children(client, alice):
    recipe = await create_recipe(client, alice)

    response = await client.put(
        f"{RECIPES}/{recipe['id']}",
        json=recipe_payload("Soup", ingredients=[
            {"name": "Leek", "quantity": 1, "unit": "pcs", "notes": "white part only"},
            {"name": "Carrot", "quantity": 4, "unit": "pcs"},
        ], instructions=["Simmer"]),
        headers=alice["headers"],
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert [
        (line["name"], line["quantity"], line["notes"], line["display_order"])
        for line in data["ingredients"]
    ] == [("Leek", 1, "white part only", 0), ("Carrot", 4, None, 1)]
    assert data["instructions"] == [{"step_number": 1, "text": "Simmer"}]


async def test_reading_counts_views(client, alice):
    recipe = await create_recipe(client, alice)

    await client.get(f"{RECIPES}/{recipe['id']}")
    response = await client.get(f"{RECIPES}/{recipe['id']}")

    data = response.json()["data"]
    assert data["view_count"] == 2
    assert data["updated_at"] == recipe["updated_at"]


async def test_unpublished_recipes_are_hidden_from_others(client, alice, bob):
    recipe = await create_recipe(client, alice, is_published=False)

    assert (await client.get(f"{RECIPES}/{recipe['id']}")).status_code == 404
    assert (await client.get(f"{RECIPES}/{recipe['id']}", headers=bob["headers"])).status_code == 404
    assert (await client.get(f"{RECIPES}/{recipe['id']}", headers=alice["headers"])).status_code == 200

    listing = (await client.get(f"{RECIPES}/")).json()
    assert listing["data"] == []


async def test_publish_toggle_is_author_only(client, alice, bob):
    recipe = await create_recipe(client, alice)

    response = await client.post(f"{RECIPES}/{recipe['id']}/publish", headers=bob["headers"])
    assert response.status_code == 403

    response = await client.post(f"{RECIPES}/{recipe['id']}/publish", headers=alice["headers"])
    assert response.status_code == 200
    assert response.json()["data"] == {"is_published": False}


async def test_list_is_paginated(client, alice):
    for name in ("One", "Two", "Three"):
        await create_recipe(client, alice, name)

    response = await client.get(f"{RECIPES}/", params={"page": 1, "limit": 2})

    body = response.json()
    assert [recipe["name"] for recipe in body["data"]] == ["Three", "Two"]
    assert body["meta"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "total_pages": 2,
        "has_next_page": True,
        "has_prev_page": False,
    }


async def test_favorites(client, alice, bob):
    recipe = await create_recipe(client, alice)
    url = f"{RECIPES}/{recipe['id']}/favorite"

    assert (await client.post(url, headers=bob["headers"])).status_code == 201
    assert (await client.post(url, headers=bob["headers"])).status_code == 409

    detail = (await client.get(f"{RECIPES}/{recipe['id']}", headers=bob["headers"])).json()["data"]
    assert detail["is_favorited"] is True

    favorites = await client.get(f"/api/v1/users/{bob['id']}/favorites", headers=bob["headers"])
    assert [entry["id"] for entry in favorites.json()["data"]] == [recipe["id"]]

    assert (await client.delete(url, headers=bob["headers"])).status_code == 200
    assert (await client.delete(url, headers=bob["headers"])).status_code == 404


async def test_missing_recipe_uses_error_envelope(client):
    response = await client.get(f"{RECIPES}/999")

    assert response.status_code == 404
    body = response.json()
    assert body == {
        "success": False,
        "message": "Recipe not found",
        "error": "not_found",
        "request_id": response.headers["x-request-id"],
    }
