"""Health check routes"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db
from api.responses import HealthResponse
from app.config import settings
from app.exceptions import ServiceUnavailableError

router = APIRouter(prefix="/health", tags=["Health"])
logger = logging.getLogger("mealprep.api.health")


@router.get("", response_model=HealthResponse)
def health_check():
    """Basic liveness check"""
    return HealthResponse(
        status="ok", service=settings.app_name, version=settings.app_version
    )


@router.get("/db", response_model=HealthResponse)
def database_health(db: Session = Depends(get_db)):
    """Run ``SELECT 1`` against Postgres."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"database_health_failed error={e}")
        raise ServiceUnavailableError("Database unavailable")
    return HealthResponse(
        status="ok",
        service=settings.app_name,
        version=settings.app_version,
        database="ok",
    )
