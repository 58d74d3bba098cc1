"""Shopping list routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db
from api.responses import deleted_response
from domain.models import Profile
from domain.schemas.plan_schemas import (
    ShoppingItemCheck,
    ShoppingListCreate,
    ShoppingListResponse,
    ShoppingListUpdate,
)
from services.shopping_service import ShoppingService

router = APIRouter(prefix="/shopping-lists", tags=["Shopping Lists"])
logger = logging.getLogger("mealprep.api.shopping")


@router.get("", response_model=List[ShoppingListResponse])
def list_shopping_lists(
    limit: int = Query(20, ge=1, le=100),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    lists = ShoppingService.get_user_shopping_lists(db, profile.id, limit=limit)
    return [ShoppingListResponse.model_validate(sl) for sl in lists]


@router.get("/{list_id}", response_model=ShoppingListResponse)
def get_shopping_list(
    list_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ShoppingListResponse.model_validate(
        ShoppingService.get_shopping_list(db, list_id, profile.id)
    )


@router.post("", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
def create_shopping_list(
    payload: ShoppingListCreate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ShoppingListResponse.model_validate(ShoppingService.create_list(db, profile, payload))


@router.post(
    "/from-meal-plan/{plan_id}",
    response_model=ShoppingListResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_from_meal_plan(
    plan_id: UUID,
    name: Optional[str] = Query(None, max_length=255),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Aggregate the ingredients of every planned recipe into a new list."""
    shopping_list = ShoppingService.build_list(db, profile, plan_id, name=name)
    return ShoppingListResponse.model_validate(shopping_list)


@router.put("/{list_id}", response_model=ShoppingListResponse)
def update_shopping_list(
    list_id: UUID,
    payload: ShoppingListUpdate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    shopping_list = ShoppingService.update_list(db, profile, list_id, payload)
    return ShoppingListResponse.model_validate(shopping_list)


@router.patch("/{list_id}/items/{index}", response_model=ShoppingListResponse)
def check_item(
    list_id: UUID,
    index: int,
    payload: ShoppingItemCheck,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    shopping_list = ShoppingService.update_item_status(
        db, profile, list_id, index, payload.checked
    )
    return ShoppingListResponse.model_validate(shopping_list)


@router.delete("/{list_id}")
def delete_shopping_list(
    list_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ShoppingService.delete_shopping_list(db, profile, list_id)
    return deleted_response(list_id)
