"""
Schema helpers for Postgres.
"""
from __future__ import annotations

from core.db.base import get_conn


def init_db() -> None:
    """Create the preferences and alert_deliveries tables if they don't exist."""
    conn = get_conn()
    cur = conn.cursor()

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS preferences(
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS alert_deliveries(
            id SERIAL PRIMARY KEY,
            user_id TEXT NOT NULL,
            email TEXT,
            job_id TEXT NOT NULL,
            title TEXT NOT NULL,
            body TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'queued',
            deliver_at TEXT NOT NULL,
            created_at TEXT NOT NULL,
            sent_at TEXT,
            error TEXT,
            UNIQUE(user_id, job_id, deliver_at)
        )
        """
    )
    cur.execute(
        """
        CREATE INDEX IF NOT EXISTS alert_deliveries_due_idx
        ON alert_deliveries(status, deliver_at)
        """
    )

    conn.commit()
    conn.close()


__all__ = ["init_db"]
