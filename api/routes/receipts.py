"""Receipt routes. OCR itself runs in the n8n workflow."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db
from api.responses import deleted_response
from domain.models import Profile
from domain.schemas.receipt_schemas import ReceiptResponse, ReceiptResults, ReceiptUpload
from services.receipt_service import ReceiptService

router = APIRouter(prefix="/receipts", tags=["Receipts"])
logger = logging.getLogger("mealprep.api.receipts")


@router.get("", response_model=List[ReceiptResponse])
def list_receipts(
    limit: int = Query(20, ge=1, le=100),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    receipts = ReceiptService.list_receipts(db, profile.id, limit=limit)
    return [ReceiptResponse.model_validate(r) for r in receipts]


@router.get("/{receipt_id}", response_model=ReceiptResponse)
def get_receipt(
    receipt_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReceiptResponse.model_validate(ReceiptService.get_receipt(db, receipt_id, profile.id))


@router.post("", response_model=ReceiptResponse, status_code=status.HTTP_201_CREATED)
def upload_receipt(
    payload: ReceiptUpload,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Store a pending receipt and notify the OCR workflow."""
    return ReceiptResponse.model_validate(ReceiptService.upload(db, profile, payload))


@router.post("/{receipt_id}/results", response_model=ReceiptResponse)
def record_results(
    receipt_id: UUID,
    payload: ReceiptResults,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    receipt = ReceiptService.record_results(db, profile, receipt_id, payload)
    return ReceiptResponse.model_validate(receipt)


@router.delete("/{receipt_id}")
def delete_receipt(
    receipt_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ReceiptService.delete_receipt(db, profile, receipt_id)
    return deleted_response(receipt_id)
