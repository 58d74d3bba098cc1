"""
Chat request/response schemas.

Request bodies keep the camelCase keys the web client sends (``sessionId``,
``recipeText``); snake_case is accepted too.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Any
from datetime import datetime
from uuid import UUID

from domain.enums import ChatIntent

MAX_CHAT_IMAGES = 4


class ChatImage(BaseModel):
    """Image attached to a chat message (data URL or remote URL)"""

    url: str = Field(..., min_length=1)
    name: Optional[str] = None
    type: Optional[str] = None


class ChatMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = ""
    images: List[ChatImage] = []
    session_id: Optional[str] = Field(None, alias="sessionId")
    intent: Optional[ChatIntent] = None
    context: dict = {}

    @field_validator("images", mode="before")
    @classmethod
    def coerce_images(cls, v):
        if v is None:
            return []
        return [{"url": i} if isinstance(i, str) else i for i in v]

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v):
        return (v or "").strip()


class AddRecipeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_text: str = Field(..., min_length=1, alias="recipeText")


class ChatReply(BaseModel):
    id: UUID
    content: str
    sender: str = "ai"
    timestamp: Optional[datetime] = None


class ChatMessageResponse(BaseModel):
    message: str = "Message processed successfully"
    response: ChatReply
    recipe: Optional[dict] = None
    conversationId: UUID
    sessionId: str
    intentMetadata: dict


class AddRecipeResponse(BaseModel):
    message: str = "Recipe added successfully"
    recipe: dict
    confirmation: str


class ConversationResponse(BaseModel):
    id: UUID
    title: str
    session_id: str
    selected_intent: Optional[str] = None
    metadata: dict = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_message_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    content: str
    sender: str
    message_type: str = "text"
    metadata: dict = {}
    created_at: Optional[datetime] = None


class ChatHistoryResponse(BaseModel):
    messages: List[MessageResponse]
    total: int


class ExtractedRecipe(BaseModel):
    """Minimum shape a model-extracted recipe must satisfy"""

    title: str = Field(..., min_length=1)
    ingredients: List[Any] = Field(..., min_length=1)
    instructions: List[Any] = Field(..., min_length=1)
    description: Optional[str] = None
    prepTime: Optional[int] = None
    cookTime: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    tags: List[str] = []
    cuisine: Optional[str] = None

    model_config = {"extra": "allow"}
