"""
Small persistent key-value preferences (radius, push token).

Every read and write is a single-row statement, so a reader sees either the
old or the fully written new value.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.db.base import get_conn


def get_pref(key: str) -> Optional[str]:
    """Return the stored value for key, or None when unset."""
    conn = get_conn()
    cur = conn.cursor()
    cur.execute("SELECT value FROM preferences WHERE key = ?", (key,))
    row = cur.fetchone()
    conn.close()
    if not row:
        return None
    return row["value"]


def set_pref(key: str, value: str) -> None:
    """Insert or overwrite a preference value."""
    now = datetime.utcnow().isoformat(timespec="seconds")
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        INSERT INTO preferences (key, value, updated_at)
        VALUES (?, ?, ?)
        ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = EXCLUDED.updated_at
        """,
        (key, str(value), now),
    )
    conn.commit()
    conn.close()


def delete_pref(key: str) -> bool:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute("DELETE FROM preferences WHERE key = ?", (key,))
    deleted = cur.rowcount
    conn.commit()
    conn.close()
    return deleted > 0


class PostgresKeyValueStore:
    """Adapts the preference helpers to the key-value store interface used by the engine."""

    def get(self, key: str) -> Optional[str]:
        return get_pref(key)

    def set(self, key: str, value: str) -> None:
        set_pref(key, value)


__all__ = [
    "get_pref",
    "set_pref",
    "delete_pref",
    "PostgresKeyValueStore",
]
