"""
CRUD helpers for option rows, plus the SQLite options backend.

Each row holds one option namespace as a JSON object.
"""

import json
import logging
from typing import Optional

from storage.db import db_conn, init_db

logger = logging.getLogger(__name__)


def get_option(name: str, db_path: Optional[str] = None) -> Optional[dict]:
    with db_conn(db_path) as conn:
        row = conn.execute("SELECT value FROM options WHERE name = ?", (name,)).fetchone()
    if not row:
        return None
    try:
        return json.loads(row["value"])
    except (json.JSONDecodeError, ValueError):
        logger.warning("Option row %s holds invalid JSON — treating as absent", name)
        return None


def update_option(name: str, value: dict, db_path: Optional[str] = None) -> None:
    """Insert or replace the whole row for `name`."""
    with db_conn(db_path) as conn:
        conn.execute(
            """
            INSERT INTO options (name, value)
            VALUES (?, ?)
            ON CONFLICT(name) DO UPDATE SET
                value      = excluded.value,
                updated_at = datetime('now')
            """,
            (name, json.dumps(value, ensure_ascii=False)),
        )
    logger.debug("Saved option row %s (%d keys)", name, len(value))


def delete_option(name: str, db_path: Optional[str] = None) -> bool:
    with db_conn(db_path) as conn:
        cur = conn.execute("DELETE FROM options WHERE name = ?", (name,))
        deleted = cur.rowcount > 0
    if deleted:
        logger.info("Deleted option row %s", name)
    return deleted


def list_option_names(db_path: Optional[str] = None) -> list[str]:
    with db_conn(db_path) as conn:
        rows = conn.execute("SELECT name FROM options ORDER BY name").fetchall()
        return [r["name"] for r in rows]


class SqliteOptionsBackend:
    """Options backend over the `options` table."""

    def __init__(self, db_path: Optional[str] = None, create: bool = True):
        self.db_path = db_path
        if create:
            init_db(db_path)

    def read(self, name: str) -> Optional[dict]:
        return get_option(name, db_path=self.db_path)

    def write(self, name: str, mapping: dict) -> None:
        update_option(name, mapping, db_path=self.db_path)
