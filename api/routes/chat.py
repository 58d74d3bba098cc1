"""Chat routes: intent-routed messages, add-recipe and history"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db, limit_per_user
from api.rate_limiter import chat_limiter, recipe_create_limiter
from api.responses import deleted_response
from domain.mappers import ChatMapper, RecipeMapper
from domain.models import Profile
from domain.schemas.chat_schemas import (
    AddRecipeRequest,
    AddRecipeResponse,
    ChatHistoryResponse,
    ChatMessageRequest,
    ChatMessageResponse,
    ConversationResponse,
    MessageResponse,
)
from services.chat_service import ChatService

router = APIRouter(prefix="/chat", tags=["Chat"])
logger = logging.getLogger("mealprep.api.chat")


@router.post(
    "/message",
    response_model=ChatMessageResponse,
    dependencies=[Depends(limit_per_user(chat_limiter))],
)
def send_message(
    payload: ChatMessageRequest,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Route a message to recipe extraction, RAG search or general chat.
    Upstream failures come back as a friendly reply, not an error.
    """
    return ChatService.process_message(db, profile, payload)


@router.post(
    "/add-recipe",
    response_model=AddRecipeResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_per_user(recipe_create_limiter))],
)
def add_recipe(
    payload: AddRecipeRequest,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    recipe, confirmation = ChatService.add_recipe_from_text(db, profile, payload.recipe_text)
    return AddRecipeResponse(
        recipe=RecipeMapper.to_response(recipe).model_dump(mode="json"),
        confirmation=confirmation,
    )


@router.get("/conversations", response_model=List[ConversationResponse])
def list_conversations(
    limit: int = Query(50, ge=1, le=200),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    conversations = ChatService.list_conversations(db, profile.id, limit=limit)
    return [ChatMapper.conversation_to_response(c) for c in conversations]


@router.get("/conversations/{conversation_id}/messages", response_model=List[MessageResponse])
def conversation_messages(
    conversation_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    messages = ChatService.conversation_messages(db, conversation_id, profile.id)
    return [ChatMapper.message_to_response(m) for m in messages]


@router.delete("/conversations/{conversation_id}")
def delete_conversation(
    conversation_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ChatService.delete_conversation(db, conversation_id, profile.id)
    return deleted_response(conversation_id)


@router.get("/history", response_model=ChatHistoryResponse)
def chat_history(
    limit: int = Query(50, ge=1, le=500),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Most recent messages across all conversations, oldest first."""
    messages = ChatService.history(db, profile.id, limit=limit)
    return ChatHistoryResponse(
        messages=[ChatMapper.message_to_response(m) for m in messages],
        total=len(messages),
    )


@router.delete("/history")
def clear_history(
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    deleted = ChatService.clear_history(db, profile.id)
    return {"status": "ok", "deleted_conversations": deleted}
