"""Search endpoints"""

from conftest import create_recipe

SEARCH = "/api/v1/search"


async def seed(client, account):
    await create_recipe(client, account, "Tomato Soup", prep_time=5, cook_time=30, ingredients=[
        {"name": "Tomato", "quantity": 4, "unit": "pcs"},
        {"name": "Basil", "quantity": 5, "unit": "leaves"},
    ])
    await create_recipe(client, account, "Carrot Cake", difficulty="Hard", prep_time=40, cook_time=60, ingredients=[
        {"name": "Carrot", "quantity": 3, "unit": "pcs"},
        {"name": "Flour", "quantity": 200, "unit": "g"},
    ])
    await create_recipe(client, account, "Garden Salad", description="Tomato and greens", ingredients=[
        {"name": "Lettuce", "quantity": 1, "unit": "head"},
    ])
    await create_recipe(client, account, "Hidden Stew", is_published=False, ingredients=[
        {"name": "Tomato", "quantity": 2, "unit": "pcs"},
    ])


def names(response):
    return sorted(recipe["name"] for recipe in response.json()["data"])


async def test_search_by_name_matches_name_and_description(client, alice):
    await seed(client, alice)

    response = await client.get(f"{SEARCH}/recipes", params={"query": "tomato", "search_type": "name"})

    assert names(response) == ["Garden Salad", "Tomato Soup"]
    assert response.json()["meta"]["total"] == 2


async def test_search_by_ingredient(client, alice):
    await seed(client, alice)

    response = await client.get(f"{SEARCH}/recipes", params={"query": "carrot", "search_type": "ingredient"})

    assert names(response) == ["Carrot Cake"]


async def test_search_both_never_returns_unpublished(client, alice):
    await seed(client, alice)

    response = await client.get(f"{SEARCH}/recipes", params={"query": "tomato"})

    assert names(response) == ["Garden Salad", "Tomato Soup"]


async def test_filters_combine(client, alice):
    await seed(client, alice)

    response = await client.get(f"{SEARCH}/recipes", params={"difficulty": "Hard"})
    assert names(response) == ["Carrot Cake"]

    response = await client.get(f"{SEARCH}/recipes", params={"max_prep_time": 10, "max_cook_time": 30})
    assert names(response) == ["Garden Salad", "Tomato Soup"]


async def test_sort_by_name(client, alice):
    await seed(client, alice)

    response = await client.get(f"{SEARCH}/recipes", params={"sort_by": "name", "sort_order": "asc"})

    assert [recipe["name"] for recipe in response.json()["data"]] == ["Carrot Cake", "Garden Salad", "Tomato Soup"]


async def test_min_rating_filter(client, alice, bob):
    await seed(client, alice)
    soup = (await client.get(f"{SEARCH}/recipes", params={"query": "soup"})).json()["data"][0]
    await client.post("/api/v1/feedback/", json={"recipe_id": soup["id"], "rating": 5}, headers=bob["headers"])

    response = await client.get(f"{SEARCH}/recipes", params={"min_rating": 4})

    assert names(response) == ["Tomato Soup"]


async def test_ingredient_and_user_search(client, alice):
    await seed(client, alice)

    ingredients = await client.get(f"{SEARCH}/ingredients", params={"query": "to"})
    assert [entry["name"] for entry in ingredients.json()["data"]] == ["Tomato"]

    empty = await client.get(f"{SEARCH}/ingredients", params={"query": "  "})
    assert empty.json()["data"] == []

    users = await client.get(f"{SEARCH}/users", params={"query": "alic"})
    assert [entry["id"] for entry in users.json()["data"]] == [alice["id"]]


async def test_wildcards_in_queries_match_literally(client, alice):
    await seed(client, alice)
    await create_recipe(client, alice, "50% Rye Bread", ingredients=[
        {"name": "Rye_Flour", "quantity": 250, "unit": "g"},
    ])

    everything = await client.get(f"{SEARCH}/recipes", params={"query": "%", "search_type": "name"})
    assert names(everything) == ["50% Rye Bread"]

    literal = await client.get(f"{SEARCH}/recipes", params={"query": "0%", "search_type": "name"})
    assert names(literal) == ["50% Rye Bread"]

    underscore = (await client.get(f"{SEARCH}/ingredients", params={"query": "_"})).json()["data"]
    assert [ingredient["name"] for ingredient in underscore] == ["Rye_Flour"]

    catalog = (await client.get("/api/v1/ingredients/search", params={"query": "%"})).json()["data"]
    assert catalog == []
