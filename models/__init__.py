"""
RecipeShare Database Models
Central import module for all database models
"""

from .user import User, UserRole
from .recipe_models import (
    Recipe,
    Ingredient,
    RecipeIngredient,
    RecipeInstruction,
    Category,
    Difficulty,
    recipe_categories,
)
from .community_models import Feedback, Collection, CollectionRecipe, Favorite

__all__ = [
    # User models
    "User",

    # Recipe models
    "Recipe",
    "Ingredient",
    "RecipeIngredient",
    "RecipeInstruction",
    "Category",
    "recipe_categories",

    # Community models
    "Feedback",
    "Collection",
    "CollectionRecipe",
    "Favorite",

    # Enums
    "UserRole",
    "Difficulty",
]
