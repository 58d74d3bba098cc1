"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.profile_schemas import (
    AuthUser,
    ProfileResponse,
    ProfileUpdate,
    RoleResponse,
    RoleAssignment,
    SessionResponse,
    OAuthCallbackRequest,
    OAuthCallbackResponse,
    PreferencesUpdate,
    PreferencesResponse,
    ThemeUpdate,
    FamilyMemberCreate,
    FamilyMemberUpdate,
    FamilyMemberResponse,
)
from domain.schemas.recipe_schemas import (
    RecipeIngredient,
    RecipeNutrition,
    RecipeCreate,
    RecipeUpdate,
    RecipeResponse,
    RecipeListResponse,
    IngredientCreate,
    IngredientResponse,
)
from domain.schemas.plan_schemas import (
    PlannedMeal,
    MealPlanPreferences,
    MealPlanCreate,
    MealPlanUpdate,
    MealPlanResponse,
    MealPlanCreateResponse,
    RecipeSuggestion,
    ShoppingItem,
    ShoppingListCreate,
    ShoppingListUpdate,
    ShoppingItemCheck,
    ShoppingListResponse,
)
from domain.schemas.receipt_schemas import (
    ReceiptItem,
    ReceiptUpload,
    ReceiptResults,
    ReceiptResponse,
)
from domain.schemas.chat_schemas import (
    ChatImage,
    ChatMessageRequest,
    AddRecipeRequest,
    ChatReply,
    ChatMessageResponse,
    AddRecipeResponse,
    ConversationResponse,
    MessageResponse,
    ChatHistoryResponse,
    ExtractedRecipe,
)

__all__ = [
    # Profile schemas
    "AuthUser",
    "ProfileResponse",
    "ProfileUpdate",
    "RoleResponse",
    "RoleAssignment",
    "SessionResponse",
    "OAuthCallbackRequest",
    "OAuthCallbackResponse",
    "PreferencesUpdate",
    "PreferencesResponse",
    "ThemeUpdate",
    "FamilyMemberCreate",
    "FamilyMemberUpdate",
    "FamilyMemberResponse",
    # Recipe schemas
    "RecipeIngredient",
    "RecipeNutrition",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeResponse",
    "RecipeListResponse",
    "IngredientCreate",
    "IngredientResponse",
    # Planning schemas
    "PlannedMeal",
    "MealPlanPreferences",
    "MealPlanCreate",
    "MealPlanUpdate",
    "MealPlanResponse",
    "MealPlanCreateResponse",
    "RecipeSuggestion",
    "ShoppingItem",
    "ShoppingListCreate",
    "ShoppingListUpdate",
    "ShoppingItemCheck",
    "ShoppingListResponse",
    # Receipt schemas
    "ReceiptItem",
    "ReceiptUpload",
    "ReceiptResults",
    "ReceiptResponse",
    # Chat schemas
    "ChatImage",
    "ChatMessageRequest",
    "AddRecipeRequest",
    "ChatReply",
    "ChatMessageResponse",
    "AddRecipeResponse",
    "ConversationResponse",
    "MessageResponse",
    "ChatHistoryResponse",
    "ExtractedRecipe",
]
