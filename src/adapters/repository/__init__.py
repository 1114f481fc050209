"""Repository adapters - Database implementations."""

from .postgres import PostgresCardKeyRepository, PostgresClock, run_migrations

__all__ = ["PostgresCardKeyRepository", "PostgresClock", "run_migrations"]
