"""
Chat domain mappers.
The ORM exposes the ``metadata`` column as ``metadata_``; DTOs use ``metadata``.
"""

from domain.models import ChatConversation, ChatMessage
from domain.schemas.chat_schemas import ConversationResponse, MessageResponse


class ChatMapper:
    @staticmethod
    def conversation_to_response(conversation: ChatConversation) -> ConversationResponse:
        return ConversationResponse(
            id=conversation.id,
            title=conversation.title,
            session_id=conversation.session_id,
            selected_intent=conversation.selected_intent,
            metadata=conversation.metadata_ or {},
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
            last_message_at=conversation.last_message_at,
        )

    @staticmethod
    def message_to_response(message: ChatMessage) -> MessageResponse:
        return MessageResponse(
            id=message.id,
            conversation_id=message.conversation_id,
            content=message.content,
            sender=message.sender,
            message_type=message.message_type or "text",
            metadata=message.metadata_ or {},
            created_at=message.created_at,
        )
