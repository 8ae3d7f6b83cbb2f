"""Recipe collections: privacy, ownership and membership"""

from conftest import create_recipe

COLLECTIONS = "/api/v1/collections"


async def make_collection(client, account, name="Weeknight", is_public=False):
    response = await client.post(
        f"{COLLECTIONS}/", json={"name": name, "is_public": is_public}, headers=account["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_private_collection_is_owner_only(client, alice, bob, admin):
    collection = await make_collection(client, alice)
    url = f"{COLLECTIONS}/{collection['id']}"

    assert collection["is_public"] is False
    assert (await client.get(url)).status_code == 403
    assert (await client.get(url, headers=bob["headers"])).status_code == 403
    assert (await client.get(url, headers=alice["headers"])).status_code == 200
    assert (await client.get(url, headers=admin["headers"])).status_code == 200


async def test_public_listing_excludes_private_collections(client, alice):
    await make_collection(client, alice, "Secret")
    await make_collection(client, alice, "Shared", is_public=True)

    public = (await client.get(f"{COLLECTIONS}/public")).json()
    own = (await client.get(f"{COLLECTIONS}/", headers=alice["headers"])).json()

    assert [entry["name"] for entry in public["data"]] == ["Shared"]
    assert own["meta"]["total"] == 2


async def test_recipes_keep_insertion_order(client, alice, bob):
    first = await create_recipe(client, bob, "First")
    second = await create_recipe(client, bob, "Second")
    collection = await make_collection(client, alice, is_public=True)
    url = f"{COLLECTIONS}/{collection['id']}/recipes"

    for recipe in (second, first):
        response = await client.post(url, json={"recipe_id": recipe["id"]}, headers=alice["headers"])
        assert response.status_code == 201

    duplicate = await client.post(url, json={"recipe_id": first["id"]}, headers=alice["headers"])
    assert duplicate.status_code == 409

    listed = (await client.get(url)).json()["data"]
    assert [recipe["name"] for recipe in listed] == ["Second", "First"]

    detail = (await client.get(f"{COLLECTIONS}/{collection['id']}")).json()["data"]
    assert detail["recipe_count"] == 2

    removed = await client.delete(f"{url}/{second['id']}", headers=alice["headers"])
    assert removed.status_code == 200
    assert [recipe["name"] for recipe in (await client.get(url)).json()["data"]] == ["First"]


async def test_only_owner_modifies_collection(client, alice, bob):
    collection = await make_collection(client, alice)
    recipe = await create_recipe(client, bob)
    url = f"{COLLECTIONS}/{collection['id']}"

    assert (await client.put(url, json={"name": "Mine now"}, headers=bob["headers"])).status_code == 403
    assert (await client.post(
        f"{url}/recipes", json={"recipe_id": recipe["id"]}, headers=bob["headers"]
    )).status_code == 403
    assert (await client.delete(url, headers=bob["headers"])).status_code == 403

    renamed = await client.put(url, json={"name": "Sunday", "is_public": True}, headers=alice["headers"])
    assert renamed.status_code == 200
    assert renamed.json()["data"]["name"] == "Sunday"
    assert renamed.json()["data"]["is_public"] is True


async def test_adding_missing_recipe_is_not_found(client, alice):
    collection = await make_collection(client, alice)

    response = await client.post(
        f"{COLLECTIONS}/{collection['id']}/recipes", json={"recipe_id": 12345}, headers=alice["headers"]
    )

    assert response.status_code == 404


async def test_cannot_collect_someone_elses_unpublished_recipe(client, alice, bob):
    secret = await create_recipe(client, alice, "Secret Stew", is_published=False)
    collection = await make_collection(client, bob, is_public=True)
    url = f"{COLLECTIONS}/{collection['id']}/recipes"

    response = await client.post(url, json={"recipe_id": secret["id"]}, headers=bob["headers"])

    assert response.status_code == 404
    assert (await client.get(url)).json()["data"] == []


async def test_collection_hides_unpublished_recipes_from_other_viewers(client, alice, bob, admin):
    shared = await create_recipe(client, alice, "Shared Soup")
    draft = await create_recipe(client, alice, "Draft Stew", is_published=False)
    collection = await make_collection(client, alice, is_public=True)
    url = f"{COLLECTIONS}/{collection['id']}"

    for recipe in (shared, draft):
        response = await client.post(f"{url}/recipes", json={"recipe_id": recipe["id"]}, headers=alice["headers"])
        assert response.status_code == 201

    # unpublished after being collected
    toggled = await client.post(f"/api/v1/recipes/{shared['id']}/publish", headers=alice["headers"])
    assert toggled.json()["data"]["is_published"] is False

    for headers in ({}, bob["headers"]):
        assert (await client.get(f"{url}/recipes", headers=headers)).json()["data"] == []
        detail = (await client.get(url, headers=headers)).json()["data"]
        assert detail["recipe_count"] == 0

    for account in (alice, admin):
        listed = (await client.get(f"{url}/recipes", headers=account["headers"])).json()["data"]
        assert [recipe["name"] for recipe in listed] == ["Shared Soup", "Draft Stew"]
