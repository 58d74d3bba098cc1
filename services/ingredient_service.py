"""Ingredient service - global ingredient catalog."""

from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
from uuid import UUID

from domain.models import Ingredient
from domain.schemas.recipe_schemas import IngredientCreate
from repositories import IngredientRepository
from app.exceptions import ConflictError, NotFoundError

logger = logging.getLogger("mealprep.ingredient")


class IngredientService:
    """Business logic for ingredient master data management."""

    @staticmethod
    def search(
        db: Session, query: Optional[str] = None, category: Optional[str] = None, limit: int = 50
    ) -> List[Ingredient]:
        return IngredientRepository(db).search(query=query, category=category, limit=limit)

    @staticmethod
    def get_ingredient(db: Session, ingredient_id: UUID) -> Ingredient:
        ingredient = IngredientRepository(db).get_by_id(ingredient_id)
        if not ingredient:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")
        return ingredient

    @staticmethod
    def create_ingredient(db: Session, data: IngredientCreate) -> Ingredient:
        """Names are unique case-insensitively."""
        repo = IngredientRepository(db)
        if repo.get_by_name(data.name):
            raise ConflictError(f"Ingredient '{data.name}' already exists")
        try:
            ingredient = repo.create(Ingredient(**data.model_dump(mode="json")))
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"Ingredient '{data.name}' already exists")
        logger.info(f"ingredient_created id={ingredient.id} name={ingredient.name}")
        return ingredient
