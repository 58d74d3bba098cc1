"""
Domain enums for the MealPrep application.
Contains all enumeration types used across models, schemas and services.
"""

import enum


class Sender(str, enum.Enum):
    """Author of a chat message"""

    USER = "user"
    AI = "ai"


class MessageType(str, enum.Enum):
    TEXT = "text"
    RECIPE = "recipe"
    IMAGE = "image"
    SYSTEM = "system"


class ChatIntent(str, enum.Enum):
    """Routes a chat message can take"""

    RECIPE_EXTRACTION = "recipe_extraction"
    RAG_SEARCH = "rag_search"
    GENERAL_CHAT = "general_chat"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MealPlanStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class ShoppingListStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class ReceiptStatus(str, enum.Enum):
    """Receipt OCR lifecycle; the OCR itself runs in n8n"""

    PENDING = "pending"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


class MeasurementSystem(str, enum.Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class Theme(str, enum.Enum):
    """UI theme preference; SYSTEM follows the OS color-scheme setting"""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ColorScheme(str, enum.Enum):
    DEFAULT = "default"
    OCEAN = "ocean"
    FOREST = "forest"
    SUNSET = "sunset"


class RoleName(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"
    FAMILY_MEMBER = "family_member"
