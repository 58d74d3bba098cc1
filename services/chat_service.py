"""
Chat routing.

Every message is classified (or takes the caller's manual intent) and then
handled by exactly one route:

* recipe_extraction: OpenRouter turns text and/or images into recipe JSON
* rag_search: the n8n RAG workflow searches the user's saved recipes
* general_chat: OpenRouter answers with the recent conversation as context

Model and workflow failures never fail the request; the user gets a
friendly reply instead and the error is logged.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import httpx
from sqlalchemy.orm import Session

from adapters import n8n_client, openrouter_client
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError, UpstreamServiceError
from domain.enums import ChatIntent, MessageType, Sender
from domain.models import ChatConversation, ChatMessage, Profile, Recipe
from domain.prompts import (
    GENERAL_CHAT_SYSTEM_PROMPT,
    INTENT_DETECTION_SYSTEM_PROMPT,
    RECIPE_EXTRACTION_SYSTEM_PROMPT,
    intent_detection_user_prompt,
    recipe_extraction_user_prompt,
)
from domain.schemas.chat_schemas import ChatMessageRequest
from repositories import ConversationRepository, MessageRepository
from services.recipe_service import RecipeService
from services.webhook_service import WebhookService
from utils.llm_json import loads_lenient, missing_recipe_fields, unwrap_recipe

logger = logging.getLogger("mealprep.chat")

HISTORY_LIMIT = 10
TITLE_MAX = 50

EXTRACTED_REPLY = "I've extracted the recipe! Here's what I found:"
EXTRACTION_FAILED_REPLY = "I had trouble extracting the recipe: {error}"
RAG_UNAVAILABLE_REPLY = "Recipe search is temporarily unavailable. Please try again later."
RAG_FAILED_REPLY = "I had trouble searching your recipes. Please try rephrasing your question."
GENERAL_CHAT_FAILED_REPLY = (
    "I apologize, but I'm having trouble processing your message right now. Please try again."
)
ADDED_RECIPE_REPLY = (
    'I\'ve added "{title}" to your recipe collection! '
    "You can find it in your recipes section."
)

_VALID_INTENTS = {i.value for i in ChatIntent}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def conversation_title(message: str) -> str:
    if not message:
        return "New conversation"
    if len(message) > TITLE_MAX:
        return message[:TITLE_MAX] + "..."
    return message


class ChatService:
    """Business logic for chat conversations."""

    # ------------------ Intent ------------------
    @staticmethod
    def detect_intent(message: str, image_count: int = 0) -> Dict[str, Any]:
        """Classify a message; any failure falls back to general_chat at 0.5."""
        try:
            result = openrouter_client.chat_json(
                INTENT_DETECTION_SYSTEM_PROMPT,
                intent_detection_user_prompt(message, image_count),
                model=settings.text_model,
                temperature=0.1,
                max_tokens=150,
            )
        except UpstreamServiceError as e:
            logger.error(f"intent_detection_failed error={e}")
            return {
                "intent": ChatIntent.GENERAL_CHAT.value,
                "reason": f"Error: {e}",
                "confidence": 0.5,
            }

        intent = result.get("intent") if isinstance(result, dict) else None
        if intent not in _VALID_INTENTS:
            logger.warning(f"intent_invalid value={intent!r} defaulting=general_chat")
            return {
                "intent": ChatIntent.GENERAL_CHAT.value,
                "reason": "Invalid intent from classifier",
                "confidence": 0.5,
            }
        try:
            confidence = float(result.get("confidence", 0.5))
        except (TypeError, ValueError):
            confidence = 0.5
        logger.info(f"intent_detected intent={intent} confidence={confidence}")
        return {"intent": intent, "reason": result.get("reason") or "", "confidence": confidence}

    # ------------------ Routes ------------------
    @staticmethod
    def extract_recipe(message: str, images: List[str]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        """Returns (recipe, None) on success or (None, error message)."""
        user_prompt = recipe_extraction_user_prompt(message, len(images))
        try:
            if images:
                response = openrouter_client.chat_with_images(
                    RECIPE_EXTRACTION_SYSTEM_PROMPT,
                    user_prompt,
                    images,
                    model=settings.vision_model,
                    temperature=0.1,
                    max_tokens=2000,
                    response_format={"type": "json_object"},
                )
            else:
                response = openrouter_client.chat(
                    RECIPE_EXTRACTION_SYSTEM_PROMPT,
                    user_prompt,
                    model=settings.text_model,
                    temperature=0.1,
                    max_tokens=2000,
                )
            recipe = unwrap_recipe(loads_lenient(response))
            if recipe is None or missing_recipe_fields(recipe):
                raise ValueError("Invalid recipe structure: missing required fields")
        except (UpstreamServiceError, ValueError) as e:
            logger.error(f"recipe_extraction_failed error={e}")
            return None, str(e)

        logger.info(f"recipe_extracted title={recipe.get('title')!r}")
        return recipe, None

    @staticmethod
    def rag_search(message: str, session_id: str, conversation_id: UUID, user_id: UUID) -> str:
        if not settings.n8n_rag_webhook_url:
            logger.error("rag_search_unconfigured")
            return RAG_UNAVAILABLE_REPLY
        try:
            return n8n_client.rag_search(message, session_id, str(conversation_id), str(user_id))
        except httpx.HTTPError as e:
            logger.error(f"rag_search_failed error={e}")
            return RAG_FAILED_REPLY

    @staticmethod
    def general_chat(
        db: Session, message: str, conversation_id: UUID, exclude_id: Optional[UUID] = None
    ) -> str:
        recent = MessageRepository(db).recent_for_conversation(
            conversation_id, limit=HISTORY_LIMIT + 1
        )
        history = [
            {
                "role": "user" if m.sender == Sender.USER.value else "assistant",
                "content": m.content,
            }
            for m in recent
            if m.id != exclude_id
        ][-HISTORY_LIMIT:]
        try:
            return openrouter_client.chat_with_history(
                GENERAL_CHAT_SYSTEM_PROMPT,
                history,
                message,
                model=settings.chat_model,
                temperature=0.7,
                max_tokens=500,
            )
        except UpstreamServiceError as e:
            logger.error(f"general_chat_failed error={e}")
            return GENERAL_CHAT_FAILED_REPLY

    # ------------------ Conversation handling ------------------
    @staticmethod
    def _get_or_create_conversation(
        db: Session, profile: Profile, session_id: str, message: str,
        manual_intent: Optional[str], context: Dict[str, Any],
    ) -> ChatConversation:
        repo = ConversationRepository(db)
        conversation = repo.get_by_session(profile.id, session_id)
        if conversation:
            if manual_intent:
                conversation.selected_intent = manual_intent
                db.commit()
            return conversation
        conversation = repo.create(
            ChatConversation(
                user_id=profile.id,
                title=conversation_title(message),
                session_id=session_id,
                selected_intent=manual_intent,
                metadata_=context.get("metadata") or {},
            )
        )
        logger.info(f"conversation_created id={conversation.id} session_id={session_id}")
        return conversation

    @staticmethod
    def _save_message(
        db: Session, conversation: ChatConversation, content: str, sender: str,
        message_type: str, metadata: Dict[str, Any],
    ) -> ChatMessage:
        message = ChatMessage(
            conversation_id=conversation.id,
            content=content,
            sender=sender,
            message_type=message_type,
            metadata_=metadata,
        )
        db.add(message)
        conversation.last_message_at = _now()
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def process_message(db: Session, profile: Profile, request: ChatMessageRequest) -> Dict[str, Any]:
        message = request.message or ""
        images = [image.url for image in request.images]
        if not message and not images:
            raise ServiceValidationError("Message or images required")

        manual_intent = request.intent.value if request.intent else None
        session_id = (
            request.session_id
            or request.context.get("sessionId")
            or f"session-{int(time.time() * 1000)}"
        )

        conversation = ChatService._get_or_create_conversation(
            db, profile, session_id, message, manual_intent, request.context
        )
        user_message = ChatService._save_message(
            db,
            conversation,
            message or "[Images only]",
            Sender.USER.value,
            MessageType.TEXT.value,
            {"images": len(images), "hasImages": bool(images)},
        )

        started = time.monotonic()
        if manual_intent:
            intent = manual_intent
            intent_metadata: Dict[str, Any] = {"source": "manual", "intent": manual_intent}
        else:
            detected = ChatService.detect_intent(message, len(images))
            intent = detected["intent"]
            intent_metadata = {
                "source": "ai",
                "detectedIntent": detected["intent"],
                "reason": detected["reason"],
                "confidence": detected["confidence"],
            }

        recipe = None
        if intent == ChatIntent.RECIPE_EXTRACTION.value:
            recipe, error = ChatService.extract_recipe(message, images)
            reply = EXTRACTED_REPLY if recipe else EXTRACTION_FAILED_REPLY.format(error=error)
        elif intent == ChatIntent.RAG_SEARCH.value:
            reply = ChatService.rag_search(message, session_id, conversation.id, profile.id)
        else:
            reply = ChatService.general_chat(db, message, conversation.id, exclude_id=user_message.id)
        routing_duration = int((time.monotonic() - started) * 1000)
        logger.info(
            f"chat_routed conversation_id={conversation.id} intent={intent} "
            f"duration_ms={routing_duration}"
        )

        ai_message = ChatService._save_message(
            db,
            conversation,
            reply,
            Sender.AI.value,
            MessageType.RECIPE.value if recipe else MessageType.TEXT.value,
            {**intent_metadata, "recipe": recipe, "routingDuration": routing_duration},
        )
        WebhookService.chat_message_sent(ai_message, profile)

        return {
            "message": "Message processed successfully",
            "response": {
                "id": ai_message.id,
                "content": reply,
                "sender": Sender.AI.value,
                "timestamp": ai_message.created_at or _now(),
            },
            "recipe": recipe,
            "conversationId": conversation.id,
            "sessionId": session_id,
            "intentMetadata": intent_metadata,
        }

    @staticmethod
    def add_recipe_from_text(db: Session, profile: Profile, recipe_text: str) -> Tuple[Recipe, str]:
        """Extract a recipe from pasted text and save it to the collection."""
        extracted, error = ChatService.extract_recipe(recipe_text.strip(), [])
        if extracted is None:
            raise ServiceValidationError(f"Failed to add recipe: {error}")
        recipe = RecipeService.create_from_extracted(db, profile, extracted)
        WebhookService.recipe_added_via_chat(recipe, profile)
        return recipe, ADDED_RECIPE_REPLY.format(title=recipe.title)

    # ------------------ History ------------------
    @staticmethod
    def list_conversations(db: Session, user_id: UUID, limit: int = 50) -> List[ChatConversation]:
        return ConversationRepository(db).get_by_user_id(user_id, limit=limit)

    @staticmethod
    def get_conversation(db: Session, conversation_id: UUID, user_id: UUID) -> ChatConversation:
        conversation = ConversationRepository(db).get_by_id_and_user(conversation_id, user_id)
        if not conversation:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        return conversation

    @staticmethod
    def conversation_messages(db: Session, conversation_id: UUID, user_id: UUID) -> List[ChatMessage]:
        conversation = ChatService.get_conversation(db, conversation_id, user_id)
        return MessageRepository(db).list_for_conversation(conversation.id)

    @staticmethod
    def delete_conversation(db: Session, conversation_id: UUID, user_id: UUID) -> None:
        conversation = ChatService.get_conversation(db, conversation_id, user_id)
        ConversationRepository(db).delete(conversation)
        logger.info(f"conversation_deleted id={conversation_id}")

    @staticmethod
    def history(db: Session, user_id: UUID, limit: int = 50) -> List[ChatMessage]:
        return MessageRepository(db).history_for_user(user_id, limit=limit)

    @staticmethod
    def clear_history(db: Session, user_id: UUID) -> int:
        deleted = ConversationRepository(db).delete_for_user(user_id)
        logger.info(f"chat_history_cleared user_id={user_id} conversations={deleted}")
        return deleted
