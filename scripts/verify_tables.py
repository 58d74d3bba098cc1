#!/usr/bin/env python3
"""
Check that every table the API relies on exists.
Exits 1 and lists the missing tables otherwise.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List

sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("verify_tables")

EXPECTED_TABLES = [
    "profiles",
    "roles",
    "user_roles",
    "family_members",
    "user_preferences",
    "recipes",
    "recipe_embeddings",
    "ingredients",
    "meal_plans",
    "shopping_lists",
    "receipts",
    "chat_conversations",
    "chat_messages",
]


def missing_tables(existing: Iterable[str], expected: Iterable[str] = EXPECTED_TABLES) -> List[str]:
    present = set(existing)
    return [t for t in expected if t not in present]


def main() -> int:
    from sqlalchemy import inspect
    from domain.models.database import engine

    existing = inspect(engine).get_table_names()
    missing = missing_tables(existing)
    for table in EXPECTED_TABLES:
        mark = "✗" if table in missing else "✓"
        logger.info(f"{mark} {table}")

    if missing:
        logger.error(f"Missing {len(missing)} table(s): {', '.join(missing)}")
        return 1
    logger.info(f"All {len(EXPECTED_TABLES)} tables present")
    return 0


if __name__ == "__main__":
    sys.exit(main())
