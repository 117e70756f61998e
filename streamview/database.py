"""SQLite database — schema and connection helpers.

Usage
-----
    conn = db_connect(db_path)
    try:
        conn.execute(...)
        conn.commit()
    finally:
        conn.close()
"""
from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

DB_NAME = "streamview.db"


def db_connect(db_path: str) -> sqlite3.Connection:
    """Return a synchronous :class:`sqlite3.Connection` tuned for small, frequent writes.

    *Always* called inside a ``try/finally`` block by callers.
    """
    conn = sqlite3.connect(db_path, timeout=30, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    return conn


# ---------------------------------------------------------------------------
# Schema – CREATE TABLE IF NOT EXISTS
# ---------------------------------------------------------------------------

_SCHEMA = """
-- ── Profile-scoped key/value state ────────────────────────────────────────

-- One row per (profile, key). 'value' holds a JSON document; a write is a
-- single INSERT OR REPLACE so readers never observe a partial value.
CREATE TABLE IF NOT EXISTS kv_store (
    profile    TEXT NOT NULL,
    key        TEXT NOT NULL,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (profile, key)
);
"""


def init_db(db_path: str) -> None:
    """Create all tables. Safe to call on every startup (idempotent)."""
    conn = db_connect(db_path)
    try:
        conn.executescript(_SCHEMA)
        conn.commit()
        logger.info(f"Database initialised at {db_path}")
    finally:
        conn.close()
