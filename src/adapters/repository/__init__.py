"""Repository adapters - Database implementations."""

from .postgres import PostgresUserDirectory, run_migrations

__all__ = ["PostgresUserDirectory", "run_migrations"]
