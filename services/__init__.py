"""Services package - Business logic layer"""

from services.webhook_service import WebhookService
from services.profile_service import ProfileService
from services.role_service import RoleService
from services.auth_service import AuthService
from services.preference_service import PreferenceService
from services.family_service import FamilyService
from services.recipe_service import RecipeService
from services.embedding_service import EmbeddingService
from services.ingredient_service import IngredientService
from services.meal_plan_service import MealPlanService
from services.shopping_service import ShoppingService
from services.receipt_service import ReceiptService
from services.chat_service import ChatService

__all__ = [
    "WebhookService",
    "ProfileService",
    "RoleService",
    "AuthService",
    "PreferenceService",
    "FamilyService",
    "RecipeService",
    "EmbeddingService",
    "IngredientService",
    "MealPlanService",
    "ShoppingService",
    "ReceiptService",
    "ChatService",
]
