"""Store service — profile-namespaced JSON key/value persistence on SQLite."""
from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime
from typing import Any

from streamview.database import DB_NAME, db_connect
from streamview.errors import StorageError
from streamview.models.media import MediaType

logger = logging.getLogger(__name__)

BUCKET_KEY = "bucket"


def hidden_categories_key(media_type: MediaType) -> str:
    return f"hiddenCategories:{MediaType(media_type).value}"


class StoreService:
    """Key/value store where every key lives inside a profile namespace.

    Two profiles never observe each other's values.  Reads of absent keys
    return the caller's ``default``; any sqlite or decode failure is raised as
    :class:`StorageError` so callers decide whether a failed read means "no
    prior state" and a failed write is reported.
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self.db_path = os.path.join(data_dir, DB_NAME)

    def _connect(self) -> sqlite3.Connection:
        try:
            return db_connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open store at {self.db_path}: {e}") from e

    def get(self, profile: str, key: str, default: Any = "") -> Any:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE profile = ? AND key = ?",
                (profile, key),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key!r} for profile {profile!r}: {e}") from e
        finally:
            conn.close()

        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value for {key!r} in profile {profile!r}: {e}") from e

    def set(self, profile: str, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serialisable: {e}") from e
        conn = self._connect()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (profile, key, value, updated_at) VALUES (?,?,?,?)",
                (profile, key, payload, datetime.now().isoformat()),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key!r} for profile {profile!r}: {e}") from e
        finally:
            conn.close()

    def delete(self, profile: str, key: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM kv_store WHERE profile = ? AND key = ?", (profile, key))
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete {key!r} for profile {profile!r}: {e}") from e
        finally:
            conn.close()

    def keys(self, profile: str) -> list[str]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT key FROM kv_store WHERE profile = ? ORDER BY key", (profile,)
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys for profile {profile!r}: {e}") from e
        finally:
            conn.close()
        return [r["key"] for r in rows]
