"""SQLite-backed key-value table."""

import json
import logging
import re
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..errors import PersistenceError
from .table import Item

logger = logging.getLogger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLiteTable:
    """
    Key-value table stored as one JSON document per row.

    Each call opens its own connection, so an instance can be shared across
    request threads.
    """

    def __init__(self, db_path: str | Path, table_name: str = "tasks"):
        if not _TABLE_NAME_RE.match(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self._db_path = Path(db_path)
        self._table = table_name

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with WAL mode enabled."""
        conn = sqlite3.connect(self._db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextmanager
    def _get_db(self, action: str) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            logger.error("SQLite connect failed during %s: %s", action, e)
            raise PersistenceError(f"Failed to {action}") from e
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("SQLite %s failed: %s", action, e)
            raise PersistenceError(f"Failed to {action}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Initialize the database schema."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._get_db("initialize the database") as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    id TEXT PRIMARY KEY,
                    body TEXT NOT NULL
                )
            """)
        logger.info("SQLite table ready db=%s table=%s", self._db_path, self._table)

    def put_item(self, item: Item) -> None:
        with self._get_db("write item") as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO {self._table} (id, body) VALUES (?, ?)",
                (item["id"], json.dumps(item)),
            )

    def get_item(self, key: str) -> Item | None:
        with self._get_db("read item") as conn:
            row = conn.execute(
                f"SELECT body FROM {self._table} WHERE id = ?", (key,)
            ).fetchone()
        return json.loads(row["body"]) if row else None

    def scan(self) -> list[Item]:
        with self._get_db("scan items") as conn:
            rows = conn.execute(f"SELECT body FROM {self._table}").fetchall()
        return [json.loads(row["body"]) for row in rows]

    def update_item(self, key: str, changes: Item) -> Item | None:
        with self._get_db("update item") as conn:
            # Hold the write lock across the read so the merge is atomic.
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                f"SELECT body FROM {self._table} WHERE id = ?", (key,)
            ).fetchone()
            if row is None:
                return None
            item = json.loads(row["body"])
            item.update(changes)
            item["id"] = key
            conn.execute(
                f"INSERT OR REPLACE INTO {self._table} (id, body) VALUES (?, ?)",
                (key, json.dumps(item)),
            )
        return item

    def delete_item(self, key: str) -> None:
        with self._get_db("delete item") as conn:
            conn.execute(f"DELETE FROM {self._table} WHERE id = ?", (key,))
