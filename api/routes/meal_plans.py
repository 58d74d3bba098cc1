"""Meal plan routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db
from api.responses import deleted_response
from domain.models import Profile
from domain.schemas.plan_schemas import (
    MealPlanCreate,
    MealPlanCreateResponse,
    MealPlanResponse,
    MealPlanUpdate,
)
from services.meal_plan_service import MealPlanService

router = APIRouter(prefix="/meal-plans", tags=["Meal Plans"])
logger = logging.getLogger("mealprep.api.meal_plans")


@router.get("", response_model=List[MealPlanResponse])
def list_meal_plans(
    limit: int = Query(20, ge=1, le=100),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Plans ordered by start date, newest first."""
    plans = MealPlanService.list_plans(db, profile.id, limit=limit)
    return [MealPlanResponse.model_validate(p) for p in plans]


@router.get("/{plan_id}", response_model=MealPlanResponse)
def get_meal_plan(
    plan_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return MealPlanResponse.model_validate(MealPlanService.get_plan(db, plan_id, profile.id))


@router.post(
    "", response_model=MealPlanCreateResponse, status_code=status.HTTP_201_CREATED
)
def create_meal_plan(
    payload: MealPlanCreate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a plan; ``suggest: true`` also returns three recipe ideas."""
    plan, suggestions = MealPlanService.create_plan(db, profile, payload)
    return MealPlanCreateResponse(
        meal_plan=MealPlanResponse.model_validate(plan), suggestions=suggestions
    )


@router.put("/{plan_id}", response_model=MealPlanResponse)
def update_meal_plan(
    plan_id: UUID,
    payload: MealPlanUpdate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    plan = MealPlanService.update_plan(db, profile, plan_id, payload)
    return MealPlanResponse.model_validate(plan)


@router.delete("/{plan_id}")
def delete_meal_plan(
    plan_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    MealPlanService.delete_plan(db, profile, plan_id)
    return deleted_response(plan_id)
