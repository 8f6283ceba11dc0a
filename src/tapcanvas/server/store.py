"""
Marker store.

Durable table of confirmed markers keyed by an auto-incrementing integer id.
One sqlite3 connection shared by the worker threads the coordinator hands calls
to; a lock serializes statements so each call is atomic in isolation.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import dataclass
from pathlib import Path

from tapcanvas.errors import StorageError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS elements (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    x INTEGER NOT NULL,
    y INTEGER NOT NULL,
    color TEXT NOT NULL,
    created_at INTEGER NOT NULL
)
"""


@dataclass(frozen=True)
class Marker:
    id: int
    x: int
    y: int
    color: str
    created_at: int


class MarkerStore:
    """
    CRUD over the `elements` table.

    - **path**: sqlite file, or ":memory:"
    - every public method raises StorageError on any sqlite failure
    - the store never expires rows by age; that is a client concern
    """

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def open(self) -> MarkerStore:
        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"cannot open marker store at {self.path}: {e}") from e
        logger.info("marker store opened at %s", self.path)
        return self

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> MarkerStore:
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()

    def _db(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("marker store is not open")
        return self._conn

    def list_all(self) -> list[Marker]:
        with self._lock:
            try:
                rows = self._db().execute(
                    "SELECT id, x, y, color, created_at FROM elements ORDER BY id"
                ).fetchall()
            except sqlite3.Error as e:
                raise StorageError(f"list failed: {e}") from e
        return [Marker(**dict(r)) for r in rows]

    def insert(self, x: int, y: int, color: str, created_at: int) -> int:
        with self._lock:
            conn = self._db()
            try:
                with conn:
                    cur = conn.execute(
                        "INSERT INTO elements (x, y, color, created_at) VALUES (?, ?, ?, ?)",
                        (x, y, color, created_at),
                    )
            except sqlite3.Error as e:
                raise StorageError(f"insert failed: {e}") from e
        return int(cur.lastrowid)

    def remove(self, marker_id: int) -> None:
        # absent ids delete zero rows, which is fine
        with self._lock:
            conn = self._db()
            try:
                with conn:
                    conn.execute("DELETE FROM elements WHERE id = ?", (marker_id,))
            except sqlite3.Error as e:
                raise StorageError(f"remove failed: {e}") from e

    def count(self) -> int:
        with self._lock:
            try:
                (n,) = self._db().execute("SELECT COUNT(*) FROM elements").fetchone()
            except sqlite3.Error as e:
                raise StorageError(f"count failed: {e}") from e
        return int(n)
