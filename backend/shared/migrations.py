"""
SQL migration runner for the Supabase Postgres database.

Migrations are the ``*.sql`` files in ``backend/migrations`` applied in
name order. Each applied file is recorded with a checksum so edits to an
already-applied file are detected.
"""

import hashlib
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from psycopg2 import Error as DatabaseError, sql

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"
MIGRATIONS_TABLE = "_migrations"


class Migration(BaseModel):
    name: str
    path: Path
    checksum: str

    def read(self) -> str:
        return self.path.read_text()


def checksum_of(content: str) -> str:
    return hashlib.sha256(content.encode()).hexdigest()[:16]


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """All migration files in a directory, sorted by name."""
    if not directory.exists():
        logger.warning("Migrations directory not found: %s", directory)
        return []
    return [
        Migration(name=path.name, path=path, checksum=checksum_of(path.read_text()))
        for path in sorted(directory.glob("*.sql"))
    ]


class MigrationRunner:
    """Applies pending migrations over a psycopg2 connection."""

    def __init__(self, conn: Any, directory: Path = MIGRATIONS_DIR):
        self._conn = conn
        self._directory = directory

    def ensure_table(self) -> None:
        with self._conn.cursor() as cur:
            cur.execute(
                sql.SQL(
                    "CREATE TABLE IF NOT EXISTS {} ("
                    " id SERIAL PRIMARY KEY,"
                    " name VARCHAR(255) NOT NULL UNIQUE,"
                    " checksum VARCHAR(64) NOT NULL,"
                    " applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW())"
                ).format(sql.Identifier(MIGRATIONS_TABLE))
            )
        self._conn.commit()

    def applied(self) -> dict[str, dict[str, Any]]:
        """Applied migrations keyed by file name."""
        with self._conn.cursor() as cur:
            cur.execute(
                sql.SQL("SELECT name, checksum, applied_at FROM {} ORDER BY name").format(
                    sql.Identifier(MIGRATIONS_TABLE)
                )
            )
            return {
                row[0]: {"checksum": row[1], "applied_at": row[2]}
                for row in cur.fetchall()
            }

    def pending(self) -> list[Migration]:
        applied = self.applied()
        pending = []
        for migration in discover_migrations(self._directory):
            recorded = applied.get(migration.name)
            if recorded is None:
                pending.append(migration)
            elif recorded["checksum"] != migration.checksum:
                logger.warning("Migration %s has changed since it was applied", migration.name)
        return pending

    def apply(self, migration: Migration) -> None:
        """Run one migration and record it, in a single transaction."""
        try:
            with self._conn.cursor() as cur:
                cur.execute(migration.read())
                cur.execute(
                    sql.SQL("INSERT INTO {} (name, checksum) VALUES (%s, %s)").format(
                        sql.Identifier(MIGRATIONS_TABLE)
                    ),
                    (migration.name, migration.checksum),
                )
            self._conn.commit()
        except DatabaseError:
            self._conn.rollback()
            logger.error("Migration %s failed; rolled back", migration.name)
            raise
        logger.info("Applied migration %s", migration.name)
