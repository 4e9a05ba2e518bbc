"""
PostgreSQL connection helper.
Provides get_db() for use by the query layer.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2.extras import RealDictCursor

logger = logging.getLogger(__name__)


@contextmanager
def get_db(database_url: Optional[str]) -> Iterator["psycopg2.extensions.connection"]:
    """
    Open a psycopg2 connection with dictionary-based row access.

    The transaction is committed when the block exits cleanly and rolled
    back otherwise; the connection is always closed.

    Usage:
        with get_db(url) as conn:
            with conn.cursor() as cur:
                cur.execute(...)

    Raises:
        RuntimeError: If no database URL is configured.
        psycopg2.Error: If the connection fails.
    """
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")

    try:
        conn = psycopg2.connect(database_url, cursor_factory=RealDictCursor)
    except psycopg2.Error as e:
        logger.error(f"Error connecting to database: {e}")
        raise

    try:
        with conn:
            yield conn
    finally:
        conn.close()
