"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Generic, TypeVar, Optional, Type
from uuid import UUID
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.

    Every mapped table uses a UUID ``id`` primary key, so lookups by id are
    shared here. Owner-scoped lookups live in the subclasses.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """Get entity by ID"""
        return self.db.query(self.model).filter(self.model.id == entity_id).first()

    def get_by_id_and_user(self, entity_id: UUID, user_id: UUID) -> Optional[ModelType]:
        """Get entity by ID for a specific owner (authorization check)"""
        return (
            self.db.query(self.model)
            .filter(self.model.id == entity_id, self.model.user_id == user_id)
            .first()
        )

    def create(self, entity: ModelType) -> ModelType:
        """Create new entity"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelType) -> ModelType:
        """Update existing entity"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: ModelType) -> None:
        """Delete a loaded entity"""
        self.db.delete(entity)
        self.db.commit()

