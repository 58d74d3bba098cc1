"""
Grocery receipt model. OCR runs in an n8n workflow; this row tracks its state.
"""

from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Numeric, Date
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Receipt(Base):
    __tablename__ = "receipts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    store_name = Column(String(255))
    store_info = Column(JSONB)
    raw_ocr_text = Column(Text)
    processed_items = Column(JSONB, default=list)
    total_amount = Column(Numeric(10, 2))
    receipt_date = Column(Date)
    processing_status = Column(String(20), default="pending")
    confidence_score = Column(Numeric(3, 2))
    user_corrections = Column(JSONB)
    image_url = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
