"""
RecipeShare Recipe Models
Database models for recipes, ingredients, instruction steps and categories
"""

from sqlalchemy import (
    Column, Table, Integer, String, Text, Float, DateTime, ForeignKey, Boolean, Enum,
    CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func
from datetime import datetime
from typing import List, Optional
import enum

from core.database import Base
from utils.date_utils import utcnow


class Difficulty(str, enum.Enum):
    """Recipe difficulty levels"""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


recipe_categories = Table(
    "recipe_categories",
    Base.metadata,
    Column("recipe_id", Integer, ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Recipe(Base):
    """Recipe header row; child rows are owned and replaced with it"""
    __tablename__ = "recipes"
    __table_args__ = (
        CheckConstraint("servings >= 1", name="servings_positive"),
        CheckConstraint("prep_time IS NULL OR prep_time >= 0", name="prep_time_non_negative"),
        CheckConstraint("cook_time IS NULL OR cook_time >= 0", name="cook_time_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    prep_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # in minutes
    cook_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # in minutes
    servings: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, native_enum=False, values_callable=lambda e: [m.value for m in e], length=10),
        default=Difficulty.MEDIUM,
        nullable=False,
    )
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Ratings and popularity (denormalized from feedback)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    total_ratings: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    author = relationship("User", back_populates="recipes", lazy="selectin")
    ingredients: Mapped[List["RecipeIngredient"]] = relationship(
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.display_order",
        lazy="selectin",
    )
    instructions: Mapped[List["RecipeInstruction"]] = relationship(
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeInstruction.step_number",
        lazy="selectin",
    )
    categories: Mapped[List["Category"]] = relationship(
        secondary=recipe_categories,
        back_populates="recipes",
        order_by="Category.name",
        lazy="selectin",
    )
    feedback = relationship("Feedback", back_populates="recipe", cascade="all, delete-orphan", passive_deletes=True)
    favorites = relationship("Favorite", back_populates="recipe", cascade="all, delete-orphan", passive_deletes=True)
    collection_entries = relationship(
        "CollectionRecipe", back_populates="recipe", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Recipe(id={self.id}, name={self.name!r}, author_id={self.author_id})>"


class Ingredient(Base):
    """Ingredient catalog shared by every recipe"""
    __tablename__ = "ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    unit: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    calories_per_unit: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    allergen_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Dietary flags
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_vegan: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_gluten_free: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<Ingredient(id={self.id}, name={self.name!r})>"


class RecipeIngredient(Base):
    """Association row: one ingredient used by one recipe"""
    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="quantity_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ingredients.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    recipe: Mapped["Recipe"] = relationship(back_populates="ingredients")
    ingredient: Mapped["Ingredient"] = relationship(lazy="selectin")

    def __repr__(self):
        return f"<RecipeIngredient(recipe_id={self.recipe_id}, ingredient_id={self.ingredient_id})>"


class RecipeInstruction(Base):
    """Numbered instruction step of a recipe"""
    __tablename__ = "recipe_instructions"
    __table_args__ = (
        UniqueConstraint("recipe_id", "step_number", name="uq_recipe_instructions_recipe_step"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    step_number: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    recipe: Mapped["Recipe"] = relationship(back_populates="instructions")

    def __repr__(self):
        return f"<RecipeInstruction(recipe_id={self.recipe_id}, step_number={self.step_number})>"


class Category(Base):
    """Recipe category (meal type / cuisine)"""
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    meal_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    cuisine_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    recipes: Mapped[List["Recipe"]] = relationship(
        secondary=recipe_categories, back_populates="categories", passive_deletes=True
    )

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name!r})>"
