"""Registration, login, token refresh and profile endpoints"""

from conftest import PASSWORD, register

AUTH = "/api/v1/auth"


async def test_register_and_fetch_me(client):
    account = await register(client, "Carol@Example.com", "Carol")

    response = await client.get(f"{AUTH}/me", headers=account["headers"])

    assert response.status_code == 200
    me = response.json()["data"]
    assert me["email"] == "carol@example.com"
    assert me["role"] == "user"
    assert "password_hash" not in me


async def test_duplicate_email_is_a_conflict(client, alice):
    response = await client.post(f"{AUTH}/register", json={
        "email": "alice@example.com",
        "first_name": "Other",
        "last_name": "Alice",
        "password": PASSWORD,
    })

    assert response.status_code == 409


async def test_weak_password_is_rejected(client):
    response = await client.post(f"{AUTH}/register", json={
        "email": "weak@example.com",
        "first_name": "Weak",
        "last_name": "Password",
        "password": "alllowercase",
    })

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "password"


async def test_login_with_wrong_password_fails(client, alice):
    response = await client.post(f"{AUTH}/login", json={"email": "alice@example.com", "password": "Wr0ngPassword"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


async def test_login_sets_last_login(client, alice):
    response = await client.post(f"{AUTH}/login", json={"email": "alice@example.com", "password": PASSWORD})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tokens"]["token_type"] == "bearer"
    assert data["user"]["last_login_at"] is not None


async def test_refresh_token_issues_new_access_token(client, alice):
    response = await client.post(f"{AUTH}/refresh", json={"refresh_token": alice["refresh_token"]})

    assert response.status_code == 200
    token = response.json()["data"]["access_token"]
    me = await client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["id"] == alice["id"]


async def test_access_token_cannot_be_used_to_refresh(client, alice):
    access_token = alice["headers"]["Authorization"].split()[1]

    response = await client.post(f"{AUTH}/refresh", json={"refresh_token": access_token})

    assert response.status_code == 401


async def test_garbage_token_is_unauthorized(client):
    response = await client.get(f"{AUTH}/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_change_password(client, alice):
    response = await client.post(
        f"{AUTH}/change-password",
        json={"current_password": PASSWORD, "new_password": "N3wPassword"},
        headers=alice["headers"],
    )
    assert response.status_code == 200

    old = await client.post(f"{AUTH}/login", json={"email": "alice@example.com", "password": PASSWORD})
    new = await client.post(f"{AUTH}/login", json={"email": "alice@example.com", "password": "N3wPassword"})
    assert old.status_code == 401
    assert new.status_code == 200


async def test_profile_update_and_public_view(client, alice):
    response = await client.put(
        "/api/v1/users/profile", json={"bio": "Home cook", "city": "Lyon"}, headers=alice["headers"]
    )
    assert response.status_code == 200
    assert response.json()["data"]["city"] == "Lyon"

    public = (await client.get(f"/api/v1/users/{alice['id']}")).json()["data"]
    assert public["bio"] == "Home cook"
    assert "email" not in public


async def test_user_listing_is_admin_only(client, alice, admin):
    assert (await client.get("/api/v1/users/", headers=alice["headers"])).status_code == 403

    response = await client.get("/api/v1/users/", headers=admin["headers"])
    assert response.status_code == 200
    assert response.json()["meta"]["total"] == 2
