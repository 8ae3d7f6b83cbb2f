"""
RecipeShare API Routes
Main router configuration for all API endpoints
"""

from fastapi import APIRouter
import structlog

from api.endpoints import (
    auth, users, recipes, ingredients, categories, feedback, collections, search, health
)
logger = structlog.get_logger()

# Create main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"]
)

api_router.include_router(
    recipes.router,
    prefix="/recipes",
    tags=["recipes"]
)

api_router.include_router(
    ingredients.router,
    prefix="/ingredients",
    tags=["ingredients"]
)

api_router.include_router(
    categories.router,
    prefix="/categories",
    tags=["categories"]
)

api_router.include_router(
    feedback.router,
    prefix="/feedback",
    tags=["feedback"]
)

api_router.include_router(
    collections.router,
    prefix="/collections",
    tags=["collections"]
)

api_router.include_router(
    search.router,
    prefix="/search",
    tags=["search"]
)

logger.info("API routes configured successfully")
