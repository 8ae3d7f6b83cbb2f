"""
RecipeShare Services Module
Core business logic for recipes, the ingredient catalog and community features
"""

from .auth_service import AuthService, auth_service
from .recipe_service import RecipeService, recipe_service
from .ingredient_service import IngredientService, ingredient_service, resolve_ingredient_id
from .category_service import CategoryService, category_service
from .feedback_service import FeedbackService, feedback_service, recompute_recipe_rating
from .collection_service import CollectionService, collection_service
from .search_service import SearchService, search_service
from .user_service import UserService, user_service

__all__ = [
    # Authentication
    "AuthService",
    "auth_service",

    # Recipes and catalog
    "RecipeService",
    "recipe_service",
    "IngredientService",
    "ingredient_service",
    "resolve_ingredient_id",
    "CategoryService",
    "category_service",

    # Community
    "FeedbackService",
    "feedback_service",
    "recompute_recipe_rating",
    "CollectionService",
    "collection_service",

    # Discovery and accounts
    "SearchService",
    "search_service",
    "UserService",
    "user_service",
]
