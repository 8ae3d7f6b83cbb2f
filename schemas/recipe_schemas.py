"""
RecipeShare Recipe Schemas
Pydantic models for recipe authoring payloads, ingredients and categories
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.recipe_models import Difficulty


def _strip(v):
    return v.strip() if isinstance(v, str) else v


# Ingredients

class IngredientBase(BaseModel):
    unit: Optional[str] = Field(None, max_length=50)
    calories_per_unit: Optional[float] = Field(None, ge=0)
    allergen_info: Optional[str] = None


class IngredientCreate(IngredientBase):
    """Schema for adding an ingredient to the catalog"""
    name: str = Field(..., min_length=1, max_length=255)
    is_vegetarian: bool = True
    is_vegan: bool = False
    is_gluten_free: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _strip(v)


class IngredientUpdate(IngredientBase):
    """Partial ingredient update; omitted fields are left unchanged"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_vegetarian: Optional[bool] = None
    is_vegan: Optional[bool] = None
    is_gluten_free: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _strip(v)


class IngredientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    unit: Optional[str] = None
    calories_per_unit: Optional[float] = None
    allergen_info: Optional[str] = None
    is_vegetarian: bool
    is_vegan: bool
    is_gluten_free: bool
    created_at: datetime


# Categories

class CategoryCreate(BaseModel):
    """Schema for creating a category"""
    name: str = Field(..., min_length=1, max_length=100)
    meal_type: Optional[str] = Field(None, max_length=50)
    cuisine_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _strip(v)


class CategoryUpdate(BaseModel):
    """Partial category update"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    meal_type: Optional[str] = Field(None, max_length=50)
    cuisine_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _strip(v)


class CategorySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CategoryOut(CategorySummary):
    meal_type: Optional[str] = None
    cuisine_type: Optional[str] = None
    description: Optional[str] = None
    is_active: bool
    created_at: datetime


# Recipe authoring

class RecipeIngredientIn(BaseModel):
    """
    One ingredient line of a recipe payload.

    Either references a catalog ingredient by ``ingredient_id`` or names an
    ad-hoc ingredient that is looked up (exact match) or created on demand.
    """
    ingredient_id: Optional[int] = Field(None, ge=1)
    name: Optional[str] = Field(None, max_length=255)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1, max_length=50)
    notes: Optional[str] = Field(None, max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def blank_name_is_missing(cls, v):
        v = _strip(v)
        return v or None

    @field_validator("unit", mode="before")
    @classmethod
    def strip_unit(cls, v):
        return _strip(v)

    @model_validator(mode="after")
    def require_reference(self):
        if self.ingredient_id is None and self.name is None:
            raise ValueError("Each ingredient needs an ingredient_id or a name")
        return self


class RecipeCreate(BaseModel):
    """Full recipe payload, used for both create and full-replace update"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: int = Field(1, ge=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    image_url: Optional[str] = Field(None, max_length=500)
    is_published: bool = True
    ingredients: List[RecipeIngredientIn] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    category_ids: List[int] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _strip(v)

    @field_validator("instructions")
    @classmethod
    def validate_instructions(cls, v: List[str]) -> List[str]:
        steps = [step.strip() for step in v]
        if any(not step for step in steps):
            raise ValueError("Instruction steps cannot be empty")
        return steps

    @field_validator("category_ids")
    @classmethod
    def dedupe_categories(cls, v: List[int]) -> List[int]:
        return list(dict.fromkeys(v))


class RecipeUpdate(RecipeCreate):
    """Same shape as create; the stored recipe is replaced wholesale"""


# Recipe responses

class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str


class RecipeIngredientOut(BaseModel):
    """Association row with the resolved catalog ingredient"""
    id: int
    ingredient_id: int
    name: str
    quantity: float
    unit: str
    notes: Optional[str] = None
    display_order: int

    @classmethod
    def from_row(cls, row) -> "RecipeIngredientOut":
        return cls(
            id=row.id,
            ingredient_id=row.ingredient_id,
            name=row.ingredient.name,
            quantity=row.quantity,
            unit=row.unit,
            notes=row.notes,
            display_order=row.display_order,
        )


class RecipeInstructionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    step_number: int
    text: str


class RecipeSummary(BaseModel):
    """Recipe header as shown in lists"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: int
    difficulty: Difficulty
    is_published: bool
    average_rating: float
    total_ratings: int
    view_count: int
    created_at: datetime
    author: AuthorOut


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    recipe_id: int
    rating: Optional[int] = None
    comment_text: Optional[str] = None
    helpful_count: int
    is_flagged: bool
    created_at: datetime
    updated_at: datetime
    user: AuthorOut


class RecipeDetail(RecipeSummary):
    """Recipe with all child rows"""
    updated_at: datetime
    ingredients: List[RecipeIngredientOut] = Field(default_factory=list)
    instructions: List[RecipeInstructionOut] = Field(default_factory=list)
    categories: List[CategorySummary] = Field(default_factory=list)
    feedback: List[FeedbackOut] = Field(default_factory=list)
    is_favorited: bool = False

    @classmethod
    def from_recipe(cls, recipe, is_favorited: bool = False, feedback=()) -> "RecipeDetail":
        summary = RecipeSummary.model_validate(recipe)
        return cls(
            **summary.model_dump(exclude={"author"}),
            author=summary.author,
            updated_at=recipe.updated_at,
            ingredients=[RecipeIngredientOut.from_row(row) for row in recipe.ingredients],
            instructions=[RecipeInstructionOut.model_validate(step) for step in recipe.instructions],
            categories=[CategorySummary.model_validate(category) for category in recipe.categories],
            feedback=[FeedbackOut.model_validate(entry) for entry in feedback],
            is_favorited=is_favorited,
        )


class PublishStatus(BaseModel):
    is_published: bool
