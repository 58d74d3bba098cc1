"""Meal plan service"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session

from adapters import openrouter_client
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError, UpstreamServiceError
from domain.models import MealPlan, Profile
from domain.prompts import DEFAULT_RECIPE_SUGGESTIONS, recipe_suggestions_prompt
from domain.schemas.plan_schemas import MealPlanCreate, MealPlanUpdate, RecipeSuggestion
from repositories import MealPlanRepository, PreferenceRepository
from services.webhook_service import WebhookService
from utils.llm_json import loads_lenient

logger = logging.getLogger("mealprep.meal_plan")

# NOT NULL columns an update may not clear
REQUIRED_PLAN_FIELDS = ("start_date", "end_date", "meals")

_SUGGESTION_KEYS = {
    "whyRecommended": "why_recommended",
    "prepTime": "prep_time",
    "cookTime": "cook_time",
}


def parse_suggestions(text: str) -> List[RecipeSuggestion]:
    """
    Parse model output into suggestions.

    Raises:
        ValueError: output is not a JSON list of objects with a title
    """
    parsed = loads_lenient(text)
    if isinstance(parsed, dict):
        parsed = parsed.get("suggestions") or parsed.get("recipes")
    if not isinstance(parsed, list) or not parsed:
        raise ValueError("expected a JSON array of suggestions")

    suggestions = []
    for item in parsed:
        if not isinstance(item, dict) or not item.get("title"):
            raise ValueError("suggestion without title")
        data = {_SUGGESTION_KEYS.get(k, k): v for k, v in item.items()}
        for key in ("prep_time", "cook_time", "servings"):
            if not isinstance(data.get(key), (int, float)):
                data[key] = None
        suggestions.append(
            RecipeSuggestion(**{k: v for k, v in data.items() if k in RecipeSuggestion.model_fields})
        )
    return suggestions


def default_suggestions() -> List[RecipeSuggestion]:
    return [RecipeSuggestion(**s) for s in DEFAULT_RECIPE_SUGGESTIONS]


class MealPlanService:
    """Business logic for meal plans."""

    @staticmethod
    def list_plans(db: Session, user_id: UUID, limit: int = 20) -> List[MealPlan]:
        return MealPlanRepository(db).get_by_user_id(user_id, limit=limit)

    @staticmethod
    def get_plan(db: Session, plan_id: UUID, user_id: UUID) -> MealPlan:
        plan = MealPlanRepository(db).get_by_id_and_user(plan_id, user_id)
        if not plan:
            raise NotFoundError(f"Meal plan {plan_id} not found")
        return plan

    @staticmethod
    def create_plan(
        db: Session, profile: Profile, data: MealPlanCreate
    ) -> Tuple[MealPlan, List[RecipeSuggestion]]:
        """
        Create a plan. With ``suggest`` set, also ask the model for three
        recipe ideas based on the family's preferences.
        """
        plan = MealPlan(
            user_id=profile.id,
            title=data.title or f"Meal plan {data.start_date.isoformat()}",
            start_date=data.start_date,
            end_date=data.end_date,
            meals=[m.model_dump(mode="json") for m in data.meals],
            total_cost=data.total_cost,
            status=data.status.value,
        )
        plan = MealPlanRepository(db).create(plan)
        logger.info(
            f"meal_plan_created plan_id={plan.id} user_id={profile.id} meals={len(data.meals)}"
        )
        WebhookService.meal_plan_created(plan, profile)

        suggestions: List[RecipeSuggestion] = []
        if data.suggest:
            preferences = (
                data.preferences.model_dump()
                if data.preferences
                else MealPlanService._stored_preferences(db, profile)
            )
            suggestions = MealPlanService.suggest_recipes(preferences)
        return plan, suggestions

    @staticmethod
    def _stored_preferences(db: Session, profile: Profile) -> Dict[str, Any]:
        prefs = PreferenceRepository(db).get_by_user_id(profile.id)
        stored: Dict[str, Any] = {"household_size": profile.household_size or 4}
        if prefs:
            stored.update(
                dietary_restrictions=prefs.dietary_restrictions or [],
                allergies=prefs.allergies or [],
                favorite_ingredients=prefs.favorite_ingredients or [],
                disliked_ingredients=prefs.disliked_ingredients or [],
            )
        return stored

    @staticmethod
    def suggest_recipes(preferences: Dict[str, Any]) -> List[RecipeSuggestion]:
        """Three suggestions; the fixed default list when the model fails."""
        try:
            text = openrouter_client.chat_completion(
                [{"role": "user", "content": recipe_suggestions_prompt(preferences)}],
                model=settings.text_model,
                temperature=0.7,
                max_tokens=1000,
            )
        except UpstreamServiceError as e:
            logger.warning(f"suggestions_unavailable error={e}")
            return default_suggestions()
        try:
            return parse_suggestions(text)[:3]
        except ValueError as e:
            logger.warning(f"suggestions_unparsable error={e}")
            return default_suggestions()

    @staticmethod
    def update_plan(
        db: Session, profile: Profile, plan_id: UUID, data: MealPlanUpdate
    ) -> MealPlan:
        plan = MealPlanService.get_plan(db, plan_id, profile.id)
        changes = data.model_dump(exclude_unset=True)
        nulled = sorted(f for f in REQUIRED_PLAN_FIELDS if f in changes and changes[f] is None)
        if nulled:
            raise ServiceValidationError(
                f"{', '.join(nulled)} cannot be null", details={"fields": nulled}
            )

        start = changes.get("start_date", plan.start_date)
        end = changes.get("end_date", plan.end_date)
        if start and end and end < start:
            raise ServiceValidationError("end_date must be on or after start_date")

        for field, value in changes.items():
            if field == "meals" and value is not None:
                value = [m.model_dump(mode="json") for m in data.meals]
            elif field == "status":
                if value is None:
                    continue
                value = value.value
            setattr(plan, field, value)

        plan = MealPlanRepository(db).update(plan)
        logger.info(f"meal_plan_updated plan_id={plan.id} fields={sorted(changes)}")
        WebhookService.meal_plan_updated(plan, profile, data.model_dump(exclude_unset=True, mode="json"))
        return plan

    @staticmethod
    def delete_plan(db: Session, profile: Profile, plan_id: UUID) -> None:
        plan = MealPlanService.get_plan(db, plan_id, profile.id)
        MealPlanRepository(db).delete(plan)
        logger.info(f"meal_plan_deleted plan_id={plan_id}")
        WebhookService.meal_plan_deleted(plan_id, profile)
