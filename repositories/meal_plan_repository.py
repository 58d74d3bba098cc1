"""
Meal Plan Repository - Data access layer for meal plans and shopping lists
"""

from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MealPlan, ShoppingList


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def get_by_user_id(self, user_id: UUID, limit: int = 20) -> List[MealPlan]:
        """Get meal plans for a user, newest start date first"""
        return (
            self.db.query(MealPlan)
            .filter(MealPlan.user_id == user_id)
            .order_by(MealPlan.start_date.desc())
            .limit(limit)
            .all()
        )


class ShoppingListRepository(BaseRepository[ShoppingList]):
    """Repository for shopping list data access"""

    def __init__(self, db: Session):
        super().__init__(db, ShoppingList)

    def get_by_user_id(self, user_id: UUID, limit: int = 20) -> List[ShoppingList]:
        """Get all shopping lists for a user"""
        return (
            self.db.query(ShoppingList)
            .filter(ShoppingList.user_id == user_id)
            .order_by(ShoppingList.created_at.desc())
            .limit(limit)
            .all()
        )
