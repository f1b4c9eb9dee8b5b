"""Utility script to prepare the configured database."""
from __future__ import annotations

import argparse
import sys

import psycopg
from psycopg import sql
from sqlalchemy.engine import make_url

from agentboards.core.settings import settings
from agentboards.db.session import build_engine, create_tables


def ensure_postgres_database(db_url: str) -> None:
    """Create the target Postgres database through the maintenance database if missing."""
    url = make_url(db_url)
    target_db = url.database or "postgres"
    admin_url = url.set(drivername="postgresql", database="postgres")
    conninfo = admin_url.render_as_string(hide_password=False)

    with psycopg.connect(conninfo, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is None:
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
            print(f"[ensure_db] created database {target_db}")
        else:
            print(f"[ensure_db] database {target_db} already exists")


def main() -> None:
    parser = argparse.ArgumentParser(description="Ensure the configured database exists")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create any missing tables from the ORM metadata (development only).",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args()

    db_url = args.url or settings.database_url_sync
    try:
        if make_url(db_url).get_backend_name() == "postgresql":
            ensure_postgres_database(db_url)
        if args.create_tables:
            create_tables(build_engine(db_url))
            print("[ensure_db] tables created")
    except Exception as exc:
        print(f"[ensure_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
