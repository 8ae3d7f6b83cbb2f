"""
Shared fixtures: a throwaway SQLite database, an ASGI client and registered users
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="recipeshare-tests-")

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'recipeshare.db')}"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import update  # noqa: E402

from core import database  # noqa: E402
from core.config import settings  # noqa: E402
from main import app  # noqa: E402
from models.user import User, UserRole  # noqa: E402
from schemas.auth_schemas import UserCreate  # noqa: E402
from services.auth_service import auth_service  # noqa: E402

PASSWORD = "Sup3rSecret"


@pytest_asyncio.fixture
async def db_engine():
    await database.init_db(settings.DATABASE_URL)
    await database.create_tables()
    yield database.engine
    await database.drop_tables()
    await database.close_db()


@pytest_asyncio.fixture
async def session(db_engine):
    async with database.async_session_factory() as db:
        yield db


@pytest_asyncio.fixture
async def client(db_engine):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def create_user(db, email: str, first_name: str = "Test", admin: bool = False) -> User:
    """Register a user directly through the service layer"""
    user, _ = await auth_service.register_user(
        UserCreate(email=email, first_name=first_name, last_name="Cook", password=PASSWORD), db
    )
    if admin:
        user.role = UserRole.ADMIN
        await db.commit()
    return user


async def register(client: AsyncClient, email: str, first_name: str = "Test") -> dict:
    """Register over HTTP; returns the user id and ready-to-use auth headers"""
    response = await client.post("/api/v1/auth/register", json={
        "email": email,
        "first_name": first_name,
        "last_name": "Cook",
        "password": PASSWORD,
    })
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return {
        "id": data["user"]["id"],
        "headers": {"Authorization": f"Bearer {data['tokens']['access_token']}"},
        "refresh_token": data["tokens"]["refresh_token"],
    }


async def promote_to_admin(user_id: int) -> None:
    async with database.get_db_session() as db:
        await db.execute(update(User).where(User.id == user_id).values(role=UserRole.ADMIN))


@pytest_asyncio.fixture
async def alice(client):
    return await register(client, "alice@example.com", "Alice")


@pytest_asyncio.fixture
async def bob(client):
    return await register(client, "bob@example.com", "Bob")


@pytest_asyncio.fixture
async def admin(client):
    account = await register(client, "admin@example.com", "Ada")
    await promote_to_admin(account["id"])
    return account


def recipe_payload(name: str = "Soup", **overrides) -> dict:
    payload = {
        "name": name,
        "description": "A simple recipe",
        "prep_time": 10,
        "cook_time": 20,
        "servings": 2,
        "difficulty": "Easy",
        "ingredients": [
            {"name": "Carrot", "quantity": 2, "unit": "pcs", "notes": "diced"},
            {"name": "Water", "quantity": 1, "unit": "l"},
        ],
        "instructions": ["Chop the carrots", "Boil everything"],
    }
    payload.update(overrides)
    return payload


async def create_recipe(client: AsyncClient, account: dict, name: str = "Soup", **overrides) -> dict:
    response = await client.post(
        "/api/v1/recipes/", json=recipe_payload(name, **overrides), headers=account["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
