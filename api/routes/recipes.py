"""Recipe routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db, limit_per_user
from api.rate_limiter import recipe_create_limiter
from api.responses import deleted_response
from domain.enums import MeasurementSystem
from domain.mappers import RecipeMapper
from domain.models import Profile
from domain.schemas.recipe_schemas import (
    RecipeCreate,
    RecipeListResponse,
    RecipeResponse,
    RecipeUpdate,
)
from services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["Recipes"])
logger = logging.getLogger("mealprep.api.recipes")


@router.get("", response_model=RecipeListResponse)
def list_recipes(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's recipes, newest first."""
    recipes, total = RecipeService.list_recipes(db, profile.id, limit=limit, offset=offset)
    return RecipeListResponse(
        recipes=[RecipeMapper.to_response(r) for r in recipes],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/search", response_model=List[RecipeResponse])
def search_recipes(
    q: str = Query(..., min_length=1, description="Text to find in title or description"),
    limit: int = Query(20, ge=1, le=100),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    recipes = RecipeService.search_recipes(db, profile.id, q, limit=limit)
    return [RecipeMapper.to_response(r) for r in recipes]


@router.get("/public", response_model=RecipeListResponse)
def list_public_recipes(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    recipes, total = RecipeService.list_public(db, limit=limit, offset=offset)
    return RecipeListResponse(
        recipes=[RecipeMapper.to_response(r) for r in recipes],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(
    recipe_id: UUID,
    measurement_system: Optional[MeasurementSystem] = Query(
        None, description="Convert ingredient amounts for display"
    ),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    recipe = RecipeService.get_recipe(db, recipe_id, profile.id)
    system = measurement_system.value if measurement_system else None
    return RecipeMapper.to_response(recipe, measurement_system=system)


@router.post(
    "",
    response_model=RecipeResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_per_user(recipe_create_limiter))],
)
def create_recipe(
    payload: RecipeCreate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    recipe = RecipeService.create_recipe(db, profile, payload)
    return RecipeMapper.to_response(recipe)


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: UUID,
    payload: RecipeUpdate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    recipe = RecipeService.update_recipe(db, profile, recipe_id, payload)
    return RecipeMapper.to_response(recipe)


@router.delete("/{recipe_id}")
def delete_recipe(
    recipe_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    RecipeService.delete_recipe(db, profile, recipe_id)
    return deleted_response(recipe_id)
