"""
PostgreSQL user directory adapter - Implements UserDirectory protocol.

This module answers "is this email already registered?" against the
users table using psycopg3 with raw SQL.

The lookup is a fast-path for the signup form only. It races benignly
with concurrent registrations; the UNIQUE constraint on users.email is
what actually prevents duplicate accounts.
"""

import logging
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import UserDirectoryUnavailable

logger = logging.getLogger(__name__)


class PostgresUserDirectory:
    """
    Implements UserDirectory protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize directory with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def email_exists(self, email: str) -> bool:
        """
        Check whether an account already uses this email.

        Comparison is case-insensitive so that accounts created before
        normalization was enforced are still found.

        Args:
            email: Normalized email address (lowercase, stripped)

        Returns:
            True if a users row exists for the email
        """
        sql = "SELECT 1 FROM users WHERE lower(email) = %s LIMIT 1"

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email,))
                return cursor.fetchone() is not None
        except psycopg.Error as e:
            raise UserDirectoryUnavailable("User lookup failed") from e


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
