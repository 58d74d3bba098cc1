"""
Meal planning and shopping list models.
"""

from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Numeric, Date
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class MealPlan(Base):
    """A dated meal plan; ``meals`` holds the planned entries as JSON"""

    __tablename__ = "meal_plans"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255))
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    meals = Column(JSONB, nullable=False, default=list)
    grocery_list = Column(JSONB)
    total_cost = Column(Numeric(10, 2))
    status = Column(String(20), default="draft")
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class ShoppingList(Base):
    """Shopping list, optionally generated from a meal plan"""

    __tablename__ = "shopping_lists"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meal_plan_id = Column(
        UUID(as_uuid=True), ForeignKey("meal_plans.id", ondelete="SET NULL")
    )
    name = Column(String(255), nullable=False, default="Shopping List")
    items = Column(JSONB, nullable=False, default=list)
    status = Column(String(20), default="active")
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
