"""Pydantic schemas for recipes and the ingredient catalog."""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Any
from uuid import UUID
from datetime import datetime

from domain.enums import Difficulty
from utils.sanitize import strip_html


class RecipeIngredient(BaseModel):
    """Ingredient line stored inside ``recipes.ingredients``."""

    name: str = Field(..., min_length=1)
    amount: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None


class RecipeNutrition(BaseModel):
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None


class RecipeBase(BaseModel):
    description: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    total_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1, le=100)
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    cuisine: Optional[str] = Field(None, max_length=100)
    image_url: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    nutrition_info: Optional[RecipeNutrition] = None
    source_url: Optional[str] = None
    is_public: Optional[bool] = None

    @field_validator("description")
    @classmethod
    def clean_description(cls, v):
        return strip_html(v)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        if v is None:
            return v
        return sorted({t.lower().strip() for t in v if t and t.strip()})


class RecipeCreate(RecipeBase):
    title: str = Field(..., min_length=1, max_length=255)
    ingredients: List[RecipeIngredient] = Field(..., min_length=1)
    instructions: List[str] = Field(..., min_length=1)
    servings: Optional[int] = Field(4, ge=1, le=100)
    difficulty: Optional[Difficulty] = Difficulty.MEDIUM
    is_public: Optional[bool] = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        v = strip_html(v)
        if not v:
            raise ValueError("title must not be blank")
        return v


class RecipeUpdate(RecipeBase):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    ingredients: Optional[List[RecipeIngredient]] = None
    instructions: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        if v is None:
            return v
        v = strip_html(v)
        if not v:
            raise ValueError("title must not be blank")
        return v


class RecipeResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    slug: Optional[str] = None
    description: Optional[str] = None
    ingredients: List[dict] = []
    instructions: List[Any] = []
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    total_time: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    tags: List[str] = []
    cuisine: Optional[str] = None
    image_url: Optional[str] = None
    rating: Optional[float] = None
    nutrition_info: Optional[dict] = None
    source_url: Optional[str] = None
    is_public: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RecipeListResponse(BaseModel):
    recipes: List[RecipeResponse]
    total: int
    limit: int
    offset: int


class IngredientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    subcategory: Optional[str] = Field(None, max_length=100)
    common_names: List[str] = []
    nutrition_info: Optional[dict] = None
    typical_unit: Optional[str] = Field(None, max_length=50)
    typical_price: Optional[float] = Field(None, ge=0)
    is_common: bool = False

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v):
        return v.strip().lower()


class IngredientResponse(BaseModel):
    id: UUID
    name: str
    category: Optional[str] = None
    subcategory: Optional[str] = None
    common_names: Optional[List[str]] = []
    nutrition_info: Optional[dict] = None
    typical_unit: Optional[str] = None
    typical_price: Optional[float] = None
    is_common: Optional[bool] = False

    model_config = {"from_attributes": True}
