"""
Database configuration and session management.
"""

import logging
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

logger = logging.getLogger("mealprep.database")

# Create SQLAlchemy Base
Base = declarative_base()

# Create engine
engine = create_engine(
    settings.postgres_db_url, echo=settings.db_echo, pool_pre_ping=True, future=True
)

# Create session factory
SessionLocal = sessionmaker(bind=engine, future=True)


def init_database():
    """Verify the database is reachable.

    The schema is owned by the SQL files in ``migrations/`` (triggers, RLS
    policies). Outside production, tables that are still missing are created
    from the ORM metadata so a fresh local database is usable immediately.
    """
    with engine.begin() as conn:
        conn.execute(text("SELECT 1"))
        logger.info("PostgreSQL connection verified")

        if not settings.is_production():
            Base.metadata.create_all(bind=conn)
            logger.info("Missing tables created from ORM metadata")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
