from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from uuid import UUID


class ReceiptItem(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None


class ReceiptUpload(BaseModel):
    image_url: str = Field(..., min_length=1)
    store_name: Optional[str] = Field(None, max_length=255)


class ReceiptResults(BaseModel):
    """Processing output posted back by the OCR workflow"""

    processed_items: List[ReceiptItem] = []
    raw_ocr_text: Optional[str] = None
    store_name: Optional[str] = Field(None, max_length=255)
    store_info: Optional[dict] = None
    total_amount: Optional[float] = Field(None, ge=0)
    receipt_date: Optional[date] = None
    confidence_score: Optional[float] = Field(None, ge=0, le=1)
    failed: bool = False


class ReceiptResponse(BaseModel):
    id: UUID
    user_id: UUID
    store_name: Optional[str] = None
    store_info: Optional[dict] = None
    raw_ocr_text: Optional[str] = None
    processed_items: List[dict] = []
    total_amount: Optional[float] = None
    receipt_date: Optional[date] = None
    processing_status: str
    confidence_score: Optional[float] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
