"""
RecipeShare Community Schemas
Pydantic models for feedback, collections and favorites
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from schemas.recipe_schemas import AuthorOut, FeedbackOut, RecipeSummary


class FeedbackCreate(BaseModel):
    """Schema for rating and/or commenting on a recipe"""
    recipe_id: int = Field(..., ge=1)
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment_text: Optional[str] = Field(None, max_length=2000)

    @field_validator("comment_text", mode="before")
    @classmethod
    def blank_comment_is_missing(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v or None

    @model_validator(mode="after")
    def require_content(self):
        if self.rating is None and self.comment_text is None:
            raise ValueError("Feedback needs a rating or a comment")
        return self


class FeedbackUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment_text: Optional[str] = Field(None, max_length=2000)


class CollectionCreate(BaseModel):
    """Schema for creating a recipe collection"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    is_public: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class CollectionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    is_public: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class CollectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    is_public: bool
    owner: AuthorOut
    recipe_count: int = 0
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_collection(cls, collection, recipe_count: int) -> "CollectionOut":
        return cls(
            id=collection.id,
            name=collection.name,
            description=collection.description,
            is_public=collection.is_public,
            owner=AuthorOut.model_validate(collection.owner),
            recipe_count=recipe_count,
            created_at=collection.created_at,
            updated_at=collection.updated_at,
        )


class CollectionRecipeAdd(BaseModel):
    recipe_id: int = Field(..., ge=1)


class CollectionDetail(CollectionOut):
    """Collection together with its recipes, in insertion order"""
    recipes: List[RecipeSummary] = Field(default_factory=list)
