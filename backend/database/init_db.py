"""
Database bootstrap.

Applies schema.sql and checks that the tables the API needs exist.

Usage:
    python -m backend.database.init_db
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

from backend.config import load_settings
from backend.database.db_connection import get_db

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")
TABLES = ("users", "events")


def init_db(database_url: Optional[str]) -> Dict[str, bool]:
    """
    Create any missing tables and report which ones exist afterwards.

    Returns:
        dict: table name -> True if present.
    """
    schema = SCHEMA_PATH.read_text(encoding="utf-8")

    with get_db(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(schema)
            found = {}
            for table in TABLES:
                cur.execute("SELECT to_regclass(%s) AS name;", (table,))
                found[table] = cur.fetchone()["name"] is not None
    return found


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")
    settings = load_settings()

    try:
        found = init_db(settings.database_url)
    except Exception as e:
        logger.error(f"Database initialisation FAILED: {e}")
        return 1

    for table, exists in found.items():
        logger.info(f" - {table}: {'Found' if exists else 'MISSING'}")

    if not all(found.values()):
        logger.error("One or more tables are missing after applying the schema.")
        return 1

    logger.info("Database schema is ready.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
