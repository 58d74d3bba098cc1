"""
Receipt Repository
"""

from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Receipt


class ReceiptRepository(BaseRepository[Receipt]):
    def __init__(self, db: Session):
        super().__init__(db, Receipt)

    def get_by_user_id(self, user_id: UUID, limit: int = 20) -> List[Receipt]:
        return (
            self.db.query(Receipt)
            .filter(Receipt.user_id == user_id)
            .order_by(Receipt.created_at.desc())
            .limit(limit)
            .all()
        )
