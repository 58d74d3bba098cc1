"""Ingredient catalog routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db
from domain.models import Profile
from domain.schemas.recipe_schemas import IngredientCreate, IngredientResponse
from services.ingredient_service import IngredientService

router = APIRouter(prefix="/ingredients", tags=["Ingredients"])
logger = logging.getLogger("mealprep.api.ingredients")


@router.get("", response_model=List[IngredientResponse])
def search_ingredients(
    q: Optional[str] = Query(None, description="Name fragment"),
    category: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ingredients = IngredientService.search(db, query=q, category=category, limit=limit)
    return [IngredientResponse.model_validate(i) for i in ingredients]


@router.get("/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient(
    ingredient_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return IngredientResponse.model_validate(IngredientService.get_ingredient(db, ingredient_id))


@router.post("", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    payload: IngredientCreate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return IngredientResponse.model_validate(IngredientService.create_ingredient(db, payload))
