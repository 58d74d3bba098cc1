"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.profile_repository import (
    ProfileRepository,
    RoleRepository,
    UserRoleRepository,
    PreferenceRepository,
    FamilyMemberRepository,
)
from repositories.recipe_repository import (
    RecipeRepository,
    RecipeEmbeddingRepository,
    IngredientRepository,
)
from repositories.meal_plan_repository import MealPlanRepository, ShoppingListRepository
from repositories.receipt_repository import ReceiptRepository
from repositories.chat_repository import ConversationRepository, MessageRepository

__all__ = [
    "BaseRepository",
    "ProfileRepository",
    "RoleRepository",
    "UserRoleRepository",
    "PreferenceRepository",
    "FamilyMemberRepository",
    "RecipeRepository",
    "RecipeEmbeddingRepository",
    "IngredientRepository",
    "MealPlanRepository",
    "ShoppingListRepository",
    "ReceiptRepository",
    "ConversationRepository",
    "MessageRepository",
]
