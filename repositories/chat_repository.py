"""
Chat Repository - conversations and messages
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import ChatConversation, ChatMessage


class ConversationRepository(BaseRepository[ChatConversation]):
    """Repository for chat conversations"""

    def __init__(self, db: Session):
        super().__init__(db, ChatConversation)

    def get_by_session(self, user_id: UUID, session_id: str) -> Optional[ChatConversation]:
        return (
            self.db.query(ChatConversation)
            .filter(
                ChatConversation.user_id == user_id,
                ChatConversation.session_id == session_id,
            )
            .first()
        )

    def get_by_user_id(self, user_id: UUID, limit: int = 50) -> List[ChatConversation]:
        """Most recently active first"""
        return (
            self.db.query(ChatConversation)
            .filter(ChatConversation.user_id == user_id)
            .order_by(
                ChatConversation.last_message_at.desc().nullslast(),
                ChatConversation.created_at.desc(),
            )
            .limit(limit)
            .all()
        )

    def delete_for_user(self, user_id: UUID) -> int:
        """Delete every conversation (and, by cascade, message) of a user"""
        count = (
            self.db.query(ChatConversation)
            .filter(ChatConversation.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count


class MessageRepository(BaseRepository[ChatMessage]):
    """Repository for chat messages"""

    def __init__(self, db: Session):
        super().__init__(db, ChatMessage)

    def recent_for_conversation(self, conversation_id: UUID, limit: int = 10) -> List[ChatMessage]:
        """Last ``limit`` messages of a conversation, oldest first"""
        rows = (
            self.db.query(ChatMessage)
            .filter(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.created_at.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(rows))

    def list_for_conversation(self, conversation_id: UUID) -> List[ChatMessage]:
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.created_at)
            .all()
        )

    def history_for_user(self, user_id: UUID, limit: int = 50) -> List[ChatMessage]:
        """Last ``limit`` messages across the user's conversations, chronological"""
        rows = (
            self.db.query(ChatMessage)
            .join(ChatConversation, ChatMessage.conversation_id == ChatConversation.id)
            .filter(ChatConversation.user_id == user_id)
            .order_by(ChatMessage.created_at.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(rows))
