"""
Quick helper to run a query against Postgres (DATABASE_URL required).

Usage:
  DATABASE_URL=... python scripts/db_shell.py                                  # list tables
  DATABASE_URL=... python scripts/db_shell.py "SELECT * FROM alert_deliveries" # run a custom query
"""
from __future__ import annotations

import sys

import psycopg
from psycopg.rows import dict_row

from core.db.base import resolve_database_url


def main() -> None:
    try:
        database_url = resolve_database_url()
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from exc

    query = " ".join(sys.argv[1:]).strip()
    if not query:
        query = (
            "SELECT tablename AS name "
            "FROM pg_tables WHERE schemaname='public' "
            "ORDER BY tablename"
        )

    print("Using DB: postgres (DATABASE_URL)", file=sys.stderr)

    try:
        with psycopg.connect(database_url, row_factory=dict_row) as conn:
            cur = conn.cursor()
            cur.execute(query)
            if cur.description is not None:
                for row in cur.fetchall():
                    print(dict(row))
            else:
                conn.commit()
                print(f"OK ({cur.rowcount} row(s) affected)")
    except psycopg.Error as exc:
        raise SystemExit(f"Error running query: {exc}") from exc


if __name__ == "__main__":
    main()
