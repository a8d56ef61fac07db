"""
SQLite database setup and connection management.
"""

import sqlite3
import os
import logging
from contextlib import contextmanager
from typing import Optional

logger = logging.getLogger(__name__)

DB_PATH = os.getenv("DB_PATH", "seo_options.db")


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path or DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


@contextmanager
def db_conn(db_path: Optional[str] = None):
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None) -> None:
    """Create the options table if it doesn't exist."""
    with db_conn(db_path) as conn:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS options (
                name        TEXT    PRIMARY KEY,
                value       TEXT    NOT NULL,   -- JSON object, the whole namespace
                updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
            );
        """)
    logger.info("Database initialised at %s", db_path or DB_PATH)
