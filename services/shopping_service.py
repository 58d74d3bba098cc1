"""Shopping list service"""

import logging
from typing import List, Dict, Any, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import ShoppingList, Profile, Recipe
from domain.schemas.plan_schemas import ShoppingListCreate, ShoppingListUpdate
from domain.enums import ShoppingListStatus
from repositories import ShoppingListRepository, RecipeRepository
from app.exceptions import NotFoundError, ServiceValidationError
from services.meal_plan_service import MealPlanService

logger = logging.getLogger("mealprep.shopping")


def _amount(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def aggregate_ingredients(
    meals: List[Dict[str, Any]], recipes_by_id: Dict[str, Recipe]
) -> List[Dict[str, Any]]:
    """
    Sum recipe ingredients across planned meals.

    Each recipe is scaled by meal servings / recipe servings. Lines with the
    same name and unit (case-insensitive) are merged; different units stay
    separate lines.
    """
    totals: Dict[tuple, Dict[str, Any]] = {}

    for meal in meals or []:
        recipe = recipes_by_id.get(str(meal.get("recipe_id") or ""))
        if recipe is None:
            continue
        base = recipe.servings or 1
        scale = (meal.get("servings") or base) / base

        for ingredient in recipe.ingredients or []:
            if isinstance(ingredient, str):
                ingredient = {"name": ingredient}
            name = (ingredient.get("name") or "").strip()
            if not name:
                continue
            unit = ingredient.get("unit") or None
            key = (name.lower(), (unit or "").strip().lower())

            entry = totals.get(key)
            if entry is None:
                entry = {
                    "name": name,
                    "amount": None,
                    "unit": unit,
                    "category": ingredient.get("category"),
                    "checked": False,
                    "recipe_ids": [],
                }
                totals[key] = entry

            amount = _amount(ingredient.get("amount"))
            if amount is not None:
                entry["amount"] = (entry["amount"] or 0) + amount * scale
            if str(recipe.id) not in entry["recipe_ids"]:
                entry["recipe_ids"].append(str(recipe.id))

    items = list(totals.values())
    for item in items:
        if item["amount"] is not None:
            item["amount"] = round(item["amount"], 2)
    items.sort(key=lambda i: ((i["category"] or "zzz").lower(), i["name"].lower()))
    return items


class ShoppingService:
    """Business logic for shopping lists."""

    @staticmethod
    def get_user_shopping_lists(db: Session, user_id: UUID, limit: int = 20) -> List[ShoppingList]:
        return ShoppingListRepository(db).get_by_user_id(user_id, limit=limit)

    @staticmethod
    def get_shopping_list(db: Session, list_id: UUID, user_id: UUID) -> ShoppingList:
        shopping_list = ShoppingListRepository(db).get_by_id_and_user(list_id, user_id)
        if not shopping_list:
            raise NotFoundError(f"Shopping list {list_id} not found")
        return shopping_list

    @staticmethod
    def create_list(db: Session, profile: Profile, data: ShoppingListCreate) -> ShoppingList:
        shopping_list = ShoppingList(
            user_id=profile.id,
            name=data.name.strip(),
            items=[i.model_dump(mode="json") for i in data.items],
            status=ShoppingListStatus.ACTIVE.value,
            notes=data.notes,
        )
        shopping_list = ShoppingListRepository(db).create(shopping_list)
        logger.info(f"shopping_list_created list_id={shopping_list.id} items={len(data.items)}")
        return shopping_list

    @staticmethod
    def build_list(
        db: Session, profile: Profile, plan_id: UUID, name: Optional[str] = None
    ) -> ShoppingList:
        """
        Create a shopping list from a meal plan.

        Algorithm:
        1. Load the plan (owner only)
        2. Load every recipe referenced by its meals that the user may read
        3. Aggregate ingredients, scaled per meal servings
        4. Save the list linked to the plan
        """
        logger.info(f"Building shopping list for plan {plan_id}, user {profile.id}")
        plan = MealPlanService.get_plan(db, plan_id, profile.id)

        recipe_ids = []
        for meal in plan.meals or []:
            rid = meal.get("recipe_id")
            if not rid:
                continue
            try:
                recipe_ids.append(UUID(str(rid)))
            except ValueError:
                logger.warning(f"Skipping meal with invalid recipe_id {rid!r}")

        recipes = RecipeRepository(db).get_many_for_user(recipe_ids, profile.id)
        recipes_by_id = {str(r.id): r for r in recipes}
        if len(recipes_by_id) < len(set(recipe_ids)):
            logger.warning(
                f"{len(set(recipe_ids)) - len(recipes_by_id)} planned recipes unavailable for plan {plan_id}"
            )

        items = aggregate_ingredients(plan.meals, recipes_by_id)
        shopping_list = ShoppingList(
            user_id=profile.id,
            meal_plan_id=plan.id,
            name=name or f"Shopping list for {plan.title or 'meal plan'}",
            items=items,
            status=ShoppingListStatus.ACTIVE.value,
        )
        shopping_list = ShoppingListRepository(db).create(shopping_list)
        logger.info(
            f"Shopping list created: list_id={shopping_list.id}, items={len(items)}"
        )
        return shopping_list

    @staticmethod
    def update_list(
        db: Session, profile: Profile, list_id: UUID, data: ShoppingListUpdate
    ) -> ShoppingList:
        shopping_list = ShoppingService.get_shopping_list(db, list_id, profile.id)
        changes = data.model_dump(exclude_unset=True, mode="json")
        for field, value in changes.items():
            if value is None and field in ("name", "items", "status"):
                continue
            setattr(shopping_list, field, value)
        return ShoppingListRepository(db).update(shopping_list)

    @staticmethod
    def update_item_status(
        db: Session, profile: Profile, list_id: UUID, index: int, checked: bool
    ) -> ShoppingList:
        """Check or uncheck the item at ``index``."""
        shopping_list = ShoppingService.get_shopping_list(db, list_id, profile.id)
        items = [dict(i) for i in shopping_list.items or []]
        if index < 0 or index >= len(items):
            raise ServiceValidationError(f"Item index {index} out of range")
        items[index]["checked"] = checked
        # reassign so the JSONB change is flushed
        shopping_list.items = items
        return ShoppingListRepository(db).update(shopping_list)

    @staticmethod
    def delete_shopping_list(db: Session, profile: Profile, list_id: UUID) -> None:
        shopping_list = ShoppingService.get_shopping_list(db, list_id, profile.id)
        ShoppingListRepository(db).delete(shopping_list)
        logger.info(f"Shopping list deleted: {list_id}")
