"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.profile import (
    Profile,
    Role,
    UserRole,
    FamilyMember,
    UserPreference,
)
from domain.models.recipe import Recipe, RecipeEmbedding, Ingredient
from domain.models.meal_plan import MealPlan, ShoppingList
from domain.models.chat import ChatConversation, ChatMessage
from domain.models.receipt import Receipt

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Profile models
    "Profile",
    "Role",
    "UserRole",
    "FamilyMember",
    "UserPreference",
    # Recipe models
    "Recipe",
    "RecipeEmbedding",
    "Ingredient",
    # Planning models
    "MealPlan",
    "ShoppingList",
    # Chat models
    "ChatConversation",
    "ChatMessage",
    # Receipts
    "Receipt",
]
