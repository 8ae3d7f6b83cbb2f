"""
RecipeShare API Endpoints
All API endpoint modules
"""

# Import all endpoint modules
from . import health, auth, users, recipes, ingredients, categories, feedback, collections, search

__all__ = [
    "health",
    "auth",
    "users",
    "recipes",
    "ingredients",
    "categories",
    "feedback",
    "collections",
    "search",
]
