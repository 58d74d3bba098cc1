from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from domain.enums import MealPlanStatus, ShoppingListStatus


class PlannedMeal(BaseModel):
    """One entry inside ``meal_plans.meals``"""

    date: date
    meal_type: str = Field(default="dinner", max_length=20)
    recipe_id: Optional[UUID] = None
    title: Optional[str] = None
    servings: Optional[int] = Field(default=None, ge=1, le=100)
    notes: Optional[str] = None


class MealPlanPreferences(BaseModel):
    """Inputs for AI recipe suggestions when creating a plan"""

    dietary_restrictions: List[str] = []
    allergies: List[str] = []
    favorite_ingredients: List[str] = []
    disliked_ingredients: List[str] = []
    household_size: int = Field(default=4, ge=1, le=20)
    available_ingredients: List[str] = []


class MealPlanCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    start_date: date
    end_date: date
    meals: List[PlannedMeal] = []
    status: MealPlanStatus = MealPlanStatus.DRAFT
    total_cost: Optional[float] = Field(default=None, ge=0)
    suggest: bool = False
    preferences: Optional[MealPlanPreferences] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class MealPlanUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    meals: Optional[List[PlannedMeal]] = None
    grocery_list: Optional[List[dict]] = None
    status: Optional[MealPlanStatus] = None
    total_cost: Optional[float] = Field(default=None, ge=0)


class RecipeSuggestion(BaseModel):
    title: str
    description: Optional[str] = None
    why_recommended: Optional[str] = None
    difficulty: Optional[str] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None


class MealPlanResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: Optional[str] = None
    start_date: date
    end_date: date
    meals: List[dict] = []
    grocery_list: Optional[List[dict]] = None
    total_cost: Optional[float] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MealPlanCreateResponse(BaseModel):
    meal_plan: MealPlanResponse
    suggestions: List[RecipeSuggestion] = []


class ShoppingItem(BaseModel):
    name: str = Field(..., min_length=1)
    amount: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = None
    category: Optional[str] = None
    checked: bool = False
    recipe_ids: List[UUID] = []


class ShoppingListCreate(BaseModel):
    name: str = Field(default="Shopping List", min_length=1, max_length=255)
    items: List[ShoppingItem] = []
    notes: Optional[str] = None


class ShoppingListUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    items: Optional[List[ShoppingItem]] = None
    status: Optional[ShoppingListStatus] = None
    notes: Optional[str] = None


class ShoppingItemCheck(BaseModel):
    checked: bool = True


class ShoppingListResponse(BaseModel):
    id: UUID
    user_id: UUID
    meal_plan_id: Optional[UUID] = None
    name: str
    items: List[dict] = []
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
