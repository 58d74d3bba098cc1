"""n8n event webhook dispatch"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from adapters import n8n_client

logger = logging.getLogger("mealprep.webhook")


def _user_payload(user) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "id": str(user.id),
        "email": user.email,
        "displayName": getattr(user, "display_name", None),
    }


def _recipe_payload(recipe) -> Dict[str, Any]:
    return {
        "recipeId": str(recipe.id),
        "title": recipe.title,
        "ingredients": recipe.ingredients,
        "instructions": recipe.instructions,
        "servings": recipe.servings,
        "difficulty": recipe.difficulty,
        "prepTime": recipe.prep_time,
        "cookTime": recipe.cook_time,
        "tags": recipe.tags,
    }


def _member_payload(member) -> Dict[str, Any]:
    return {
        "memberId": str(member.id),
        "name": member.name,
        "relationship": member.relationship_,
        "age": member.age,
        "dietaryRestrictions": member.dietary_restrictions,
        "allergies": member.allergies,
    }


class WebhookService:
    """
    Fire-and-forget application events for n8n.

    ``send_event`` never raises: a disabled webhook, a missing URL or a failed
    delivery all return None so the calling request still succeeds.
    """

    @staticmethod
    def send_event(
        event_type: str,
        data: Dict[str, Any],
        user=None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Any]:
        url = settings.n8n_webhook_url
        if not settings.webhook_enabled or not url:
            logger.debug(f"webhook_skipped event={event_type}")
            return None

        payload = {
            "eventType": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": data,
            "user": _user_payload(user),
            "metadata": {
                "source": n8n_client.SOURCE,
                "version": settings.app_version,
                **(metadata or {}),
            },
        }
        try:
            response = n8n_client.post_event(url, event_type, payload)
            result = response.json() if response.content else {}
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"webhook_failed event={event_type} error={e}")
            return None

        logger.info(f"webhook_sent event={event_type}")
        return result

    # Recipe events
    @staticmethod
    def recipe_created(recipe, user):
        return WebhookService.send_event("recipe.created", _recipe_payload(recipe), user)

    @staticmethod
    def recipe_updated(recipe, user, changes: Dict[str, Any]):
        data = _recipe_payload(recipe)
        data["changes"] = changes
        return WebhookService.send_event("recipe.updated", data, user)

    @staticmethod
    def recipe_deleted(recipe_id, user):
        return WebhookService.send_event(
            "recipe.deleted", {"recipeId": str(recipe_id)}, user
        )

    # Chat events
    @staticmethod
    def chat_message_sent(message, user):
        return WebhookService.send_event(
            "chat.message_sent",
            {
                "messageId": str(message.id),
                "content": message.content,
                "messageType": message.message_type,
            },
            user,
        )

    @staticmethod
    def recipe_added_via_chat(recipe, user):
        return WebhookService.send_event(
            "recipe.added_via_chat",
            {"recipeId": str(recipe.id), "title": recipe.title, "source": "chat"},
            user,
        )

    # Meal planning events
    @staticmethod
    def meal_plan_created(plan, user):
        return WebhookService.send_event(
            "meal_plan.created",
            {
                "mealPlanId": str(plan.id),
                "startDate": plan.start_date.isoformat() if plan.start_date else None,
                "endDate": plan.end_date.isoformat() if plan.end_date else None,
                "meals": plan.meals,
            },
            user,
        )

    @staticmethod
    def meal_plan_updated(plan, user, changes: Dict[str, Any]):
        return WebhookService.send_event(
            "meal_plan.updated",
            {
                "mealPlanId": str(plan.id),
                "startDate": plan.start_date.isoformat() if plan.start_date else None,
                "endDate": plan.end_date.isoformat() if plan.end_date else None,
                "meals": plan.meals,
                "changes": changes,
            },
            user,
        )

    @staticmethod
    def meal_plan_deleted(plan_id, user):
        return WebhookService.send_event(
            "meal_plan.deleted", {"mealPlanId": str(plan_id)}, user
        )

    # Receipt events
    @staticmethod
    def receipt_uploaded(receipt, user):
        return WebhookService.send_event(
            "receipt.uploaded",
            {"receiptId": str(receipt.id), "imageUrl": receipt.image_url},
            user,
        )

    @staticmethod
    def receipt_processed(receipt, user):
        return WebhookService.send_event(
            "receipt.processed",
            {
                "receiptId": str(receipt.id),
                "total": float(receipt.total_amount) if receipt.total_amount is not None else None,
                "items": receipt.processed_items,
                "store": receipt.store_name,
                "date": receipt.receipt_date.isoformat() if receipt.receipt_date else None,
            },
            user,
        )

    # Preference events
    @staticmethod
    def preferences_updated(prefs, user):
        return WebhookService.send_event(
            "preferences.updated",
            {
                "dietaryRestrictions": prefs.dietary_restrictions,
                "allergies": prefs.allergies,
                "favoriteIngredients": prefs.favorite_ingredients,
                "householdSize": getattr(user, "household_size", None),
                "measurementSystem": prefs.measurement_system,
                "theme": prefs.theme,
                "colorScheme": prefs.color_scheme,
            },
            user,
        )

    # Family member events
    @staticmethod
    def family_member_added(member, user):
        return WebhookService.send_event(
            "family_member.added", _member_payload(member), user
        )

    @staticmethod
    def family_member_updated(member, user, changes: Dict[str, Any]):
        data = _member_payload(member)
        data["changes"] = changes
        return WebhookService.send_event("family_member.updated", data, user)

    @staticmethod
    def family_member_removed(member_id, user):
        return WebhookService.send_event(
            "family_member.removed", {"memberId": str(member_id)}, user
        )

    # System events
    @staticmethod
    def user_registered(profile):
        return WebhookService.send_event(
            "user.registered",
            {
                "userId": str(profile.id),
                "email": profile.email,
                "displayName": profile.display_name,
                "householdSize": profile.household_size,
            },
            profile,
        )
