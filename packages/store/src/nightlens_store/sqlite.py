"""SQLiteStore — local file-based store, the default cache backend.

Why SQLite as the local store:
- Batteries included: ships with Python, no extra dependencies.
- Atomic upserts: a crash mid-write leaves the previous snapshot intact.
- Survives between runs, so scheduled refresh windows are honoured across
  separate `nightlens show` invocations.

Schema:
  kv  — one row per key; the dashboard only ever uses a single key.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone

from nightlens_store.base import BaseStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT
);
"""


class SQLiteStore(BaseStore):
    """Stores values in a local SQLite database file.

    The database file path defaults to `.nightlens.db` in the current working
    directory. Configure via .nightlens.yml: `store_path: /path/to/cache.db`.
    """

    def __init__(self, db_path: str = ".nightlens.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def get(self, key: str) -> str | None:
        row = self._conn.execute("SELECT value FROM kv WHERE key=?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self._conn.execute(
            """
            INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """,
            (key, value, datetime.now(timezone.utc).isoformat()),
        )
        self._conn.commit()
        logger.debug("SQLiteStore: wrote %d bytes under %r", len(value), key)

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv WHERE key=?", (key,))
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()
