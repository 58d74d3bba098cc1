#!/usr/bin/env python3
"""
Apply SQL migrations from ``migrations/`` in filename order.

Applied files are recorded in ``schema_migrations`` so each runs once.
Every file runs in its own transaction; the first failure stops the run.

Usage:
    python scripts/run_migrations.py            # apply pending migrations
    python scripts/run_migrations.py --dry-run  # list what would run
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("run_migrations")

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"

CREATE_TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  filename VARCHAR(255) PRIMARY KEY,
  applied_at TIMESTAMPTZ DEFAULT NOW()
)
"""


def list_migrations(directory: Path = MIGRATIONS_DIR) -> List[Path]:
    """All ``*.sql`` files, sorted by filename."""
    return sorted(directory.glob("*.sql"), key=lambda p: p.name)


def pending_migrations(files: Iterable[Path], applied: Iterable[str]) -> List[Path]:
    done = set(applied)
    return [f for f in files if f.name not in done]


def _applied(cursor) -> List[str]:
    cursor.execute("SELECT filename FROM schema_migrations")
    return [row[0] for row in cursor.fetchall()]


def run(dry_run: bool = False) -> int:
    from domain.models.database import engine

    # Raw DBAPI connection: migration files contain $$ bodies and % signs
    # that must reach Postgres untouched.
    conn = engine.raw_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(CREATE_TRACKING_TABLE)
        conn.commit()

        todo = pending_migrations(list_migrations(), _applied(cursor))
        if not todo:
            logger.info("✓ Database is up to date")
            return 0

        for path in todo:
            if dry_run:
                logger.info(f"→ would apply {path.name}")
                continue
            logger.info(f"→ applying {path.name}")
            try:
                cursor.execute(path.read_text(encoding="utf-8"))
                cursor.execute(
                    "INSERT INTO schema_migrations (filename) VALUES (%s)", (path.name,)
                )
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"✗ {path.name} failed: {e}")
                return 1
            logger.info(f"✓ {path.name} applied")
        return 0
    finally:
        conn.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Apply pending SQL migrations")
    parser.add_argument(
        "--dry-run", action="store_true", help="List pending migrations without applying"
    )
    args = parser.parse_args(argv)
    return run(dry_run=args.dry_run)


if __name__ == "__main__":
    sys.exit(main())
