"""
Receipt upload and OCR result handling.
"""

import uuid
from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from test_fixtures import API, client, current_profile, make_profile, make_receipt
from app.exceptions import ConflictError
from domain.schemas.receipt_schemas import ReceiptResults, ReceiptUpload
from services import receipt_service
from services.receipt_service import ReceiptService


@pytest.fixture
def receipt_events(monkeypatch):
    events = []
    monkeypatch.setattr(
        receipt_service.WebhookService, "receipt_uploaded", lambda r, u: events.append(("uploaded", r))
    )
    monkeypatch.setattr(
        receipt_service.WebhookService, "receipt_processed", lambda r, u: events.append(("processed", r))
    )
    monkeypatch.setattr(
        receipt_service, "ReceiptRepository", lambda db: SimpleNamespace(create=lambda r: r, update=lambda r: r)
    )
    return events


def test_upload_records_pending_receipt(receipt_events):
    profile = make_profile()
    receipt = ReceiptService.upload(
        MagicMock(), profile, ReceiptUpload(image_url="https://storage.example.com/r.jpg", store_name="Green Grocer")
    )
    assert receipt.processing_status == "pending"
    assert receipt.user_id == profile.id
    assert receipt.processed_items == []
    assert receipt_events == [("uploaded", receipt)]


def test_record_results(monkeypatch, receipt_events):
    receipt = make_receipt()
    monkeypatch.setattr(ReceiptService, "get_receipt", lambda db, rid, uid: receipt)

    ReceiptService.record_results(
        MagicMock(),
        make_profile(),
        receipt.id,
        ReceiptResults(
            processed_items=[{"name": "milk", "quantity": 2, "unit": "l", "price": 1.29}],
            total_amount=2.58,
            receipt_date=date(2026, 3, 1),
            confidence_score=0.92,
        ),
    )
    assert receipt.processing_status == "processed"
    assert receipt.processed_items[0]["name"] == "milk"
    assert receipt.store_name == "Green Grocer"
    assert receipt.total_amount == 2.58
    assert receipt_events == [("processed", receipt)]


def test_record_failed_results(monkeypatch, receipt_events):
    receipt = make_receipt(status="processing")
    monkeypatch.setattr(ReceiptService, "get_receipt", lambda db, rid, uid: receipt)

    ReceiptService.record_results(
        MagicMock(), make_profile(), receipt.id, ReceiptResults(failed=True, raw_ocr_text="???")
    )
    assert receipt.processing_status == "failed"
    assert receipt.raw_ocr_text == "???"
    assert receipt_events == []


def test_processed_receipt_cannot_be_processed_again(monkeypatch, receipt_events):
    monkeypatch.setattr(
        ReceiptService, "get_receipt", lambda db, rid, uid: make_receipt(status="processed")
    )
    with pytest.raises(ConflictError):
        ReceiptService.record_results(MagicMock(), make_profile(), uuid.uuid4(), ReceiptResults())


def test_upload_route(monkeypatch, current_profile):
    monkeypatch.setattr(
        ReceiptService, "upload", lambda db, profile, data: make_receipt(user_id=profile.id)
    )
    r = client.post(f"{API}/receipts", json={"image_url": "https://storage.example.com/r.jpg"})
    assert r.status_code == 201
    assert r.json()["processing_status"] == "pending"


def test_results_route_validates_confidence(current_profile):
    r = client.post(f"{API}/receipts/{uuid.uuid4()}/results", json={"confidence_score": 1.5})
    assert r.status_code == 422
