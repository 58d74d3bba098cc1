"""API routes package"""

from . import (
    auth,
    chat,
    family,
    health,
    ingredients,
    meal_plans,
    preferences,
    profiles,
    receipts,
    recipes,
    roles,
    shopping_lists,
)

__all__ = [
    "auth",
    "chat",
    "family",
    "health",
    "ingredients",
    "meal_plans",
    "preferences",
    "profiles",
    "receipts",
    "recipes",
    "roles",
    "shopping_lists",
]
