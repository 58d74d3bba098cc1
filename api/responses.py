"""
Standardized API response models and utilities.
Every error leaves the API in the same envelope.
"""

from typing import Optional, Any
from pydantic import BaseModel, Field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[Any] = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    database: Optional[str] = Field(None, description="Database status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")


def error_response(code: str, message: str, details: Any = None) -> dict:
    """Create a standardized, JSON-ready error body"""
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "timestamp": _utcnow().isoformat(),
    }


def deleted_response(entity_id: Any) -> dict:
    return {"status": "ok", "deleted": str(entity_id)}
