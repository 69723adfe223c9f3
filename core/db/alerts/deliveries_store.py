"""
Alert delivery queue and history store.

Each row is one scheduled notification for one job posting. Rows start as
'queued' and the worker moves them to 'sent' or 'failed' once deliver_at passes.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from psycopg import errors as pg_errors

from core.db.base import get_conn


def _iso(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


def queue_alert_delivery(
    *,
    user_id: str,
    email: Optional[str],
    job_id: str,
    title: str,
    body: str,
    deliver_at: datetime,
) -> Optional[int]:
    """
    Insert a queued delivery row.

    Returns the new row id, or None if the same (user_id, job_id, deliver_at) was already queued.
    """
    now = _iso(datetime.utcnow())

    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        INSERT INTO alert_deliveries
          (user_id, email, job_id, title, body, status, deliver_at, created_at, sent_at, error)
        VALUES (?, ?, ?, ?, ?, 'queued', ?, ?, NULL, NULL)
        ON CONFLICT (user_id, job_id, deliver_at) DO NOTHING
        RETURNING id
        """,
        (str(user_id), email, str(job_id), title, body, _iso(deliver_at), now),
    )
    row = cur.fetchone()
    conn.commit()
    conn.close()
    return int(row["id"]) if row else None


def get_due_alert_deliveries(*, now: Optional[datetime] = None, limit: int = 100) -> List[Dict]:
    """Return queued deliveries whose deliver_at has passed, oldest first."""
    cutoff = _iso(now or datetime.utcnow())

    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        SELECT id, user_id, email, job_id, title, body, status, deliver_at, created_at
        FROM alert_deliveries
        WHERE status = 'queued' AND deliver_at <= ?
        ORDER BY deliver_at ASC, id ASC
        LIMIT ?
        """,
        (cutoff, int(limit)),
    )
    rows = cur.fetchall()
    conn.close()
    return [dict(r) for r in rows]


def mark_alert_delivery_sent(delivery_id: int) -> None:
    now = _iso(datetime.utcnow())
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        UPDATE alert_deliveries
        SET status='sent', sent_at=?, error=NULL
        WHERE id=?
        """,
        (now, int(delivery_id)),
    )
    conn.commit()
    conn.close()


def mark_alert_delivery_failed(delivery_id: int, error: str) -> None:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        UPDATE alert_deliveries
        SET status='failed', sent_at=NULL, error=?
        WHERE id=?
        """,
        (f"{error}".strip()[:500], int(delivery_id)),
    )
    conn.commit()
    conn.close()


def get_alert_deliveries_for_user(*, user_id: str, limit: int = 200) -> List[Dict]:
    """
    Return delivery history for a user, newest first.
    """
    conn = get_conn()
    cur = conn.cursor()

    try:
        cur.execute(
            """
            SELECT id AS delivery_id, job_id, title, body, status, deliver_at, created_at, sent_at, error
            FROM alert_deliveries
            WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
            LIMIT ?
            """,
            (str(user_id), int(limit)),
        )
    except pg_errors.UndefinedTable:
        conn.close()
        return []

    rows = cur.fetchall()
    conn.close()
    return [dict(r) for r in rows]


def delete_alert_deliveries_for_user(user_id: str) -> int:
    conn = get_conn()
    cur = conn.cursor()
    try:
        cur.execute("DELETE FROM alert_deliveries WHERE user_id=?", (str(user_id),))
        deleted = cur.rowcount
        conn.commit()
    finally:
        conn.close()
    return deleted
