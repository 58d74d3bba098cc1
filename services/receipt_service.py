"""Receipt upload and OCR result bookkeeping"""

import logging
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from domain.enums import ReceiptStatus
from domain.models import Profile, Receipt
from domain.schemas.receipt_schemas import ReceiptResults, ReceiptUpload
from repositories import ReceiptRepository
from app.exceptions import NotFoundError, ConflictError
from services.webhook_service import WebhookService

logger = logging.getLogger("mealprep.receipts")


class ReceiptService:
    @staticmethod
    def list_receipts(db: Session, user_id: UUID, limit: int = 20) -> List[Receipt]:
        return ReceiptRepository(db).get_by_user_id(user_id, limit=limit)

    @staticmethod
    def get_receipt(db: Session, receipt_id: UUID, user_id: UUID) -> Receipt:
        receipt = ReceiptRepository(db).get_by_id_and_user(receipt_id, user_id)
        if not receipt:
            raise NotFoundError(f"Receipt {receipt_id} not found")
        return receipt

    @staticmethod
    def upload(db: Session, profile: Profile, data: ReceiptUpload) -> Receipt:
        """Record a pending receipt and hand it to the OCR workflow."""
        receipt = ReceiptRepository(db).create(
            Receipt(
                user_id=profile.id,
                image_url=data.image_url,
                store_name=data.store_name,
                processed_items=[],
                processing_status=ReceiptStatus.PENDING.value,
            )
        )
        logger.info(f"receipt_uploaded receipt_id={receipt.id} user_id={profile.id}")
        WebhookService.receipt_uploaded(receipt, profile)
        return receipt

    @staticmethod
    def record_results(
        db: Session, profile: Profile, receipt_id: UUID, data: ReceiptResults
    ) -> Receipt:
        receipt = ReceiptService.get_receipt(db, receipt_id, profile.id)
        if receipt.processing_status == ReceiptStatus.PROCESSED.value:
            raise ConflictError("Receipt has already been processed")

        if data.failed:
            receipt.processing_status = ReceiptStatus.FAILED.value
            receipt.raw_ocr_text = data.raw_ocr_text
            receipt = ReceiptRepository(db).update(receipt)
            logger.warning(f"receipt_failed receipt_id={receipt.id}")
            return receipt

        receipt.processed_items = [i.model_dump(mode="json") for i in data.processed_items]
        receipt.raw_ocr_text = data.raw_ocr_text
        receipt.store_name = data.store_name or receipt.store_name
        receipt.store_info = data.store_info
        receipt.total_amount = data.total_amount
        receipt.receipt_date = data.receipt_date
        receipt.confidence_score = data.confidence_score
        receipt.processing_status = ReceiptStatus.PROCESSED.value
        receipt = ReceiptRepository(db).update(receipt)

        logger.info(
            f"receipt_processed receipt_id={receipt.id} items={len(data.processed_items)}"
        )
        WebhookService.receipt_processed(receipt, profile)
        return receipt

    @staticmethod
    def delete_receipt(db: Session, profile: Profile, receipt_id: UUID) -> None:
        receipt = ReceiptService.get_receipt(db, receipt_id, profile.id)
        ReceiptRepository(db).delete(receipt)
        logger.info(f"receipt_deleted receipt_id={receipt_id}")
