"""
PostgreSQL repository adapter - Implements CardKeyRepository and Clock protocols.

This module provides the PostgreSQL implementation of the domain's
repository and clock ports using psycopg3 with raw SQL.

Concurrency Design - Exactly-Once Activation:
--------------------------------------------
First activation is a single conditional UPDATE:

    UPDATE card_keys SET is_used = TRUE, first_used_at = %s
    WHERE code_key = %s AND is_used = FALSE

PostgreSQL row locking serializes concurrent updates on the same row. The
second writer re-evaluates `is_used = FALSE` after the first commits, matches
zero rows, and reports rowcount 0. There is no read-then-write window.

Time Source:
-----------
The database server clock is the single authoritative time source. The
domain reads it once per request through PostgresClock and passes the value
into both the live-key filter and the activation stamp.
"""

import logging
from pathlib import Path

from psycopg_pool import ConnectionPool

from src.domain.ports import CardKeyRecord

logger = logging.getLogger(__name__)


class PostgresCardKeyRepository:
    """
    Implements CardKeyRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_live(self, code: str, now: int, window_seconds: int) -> CardKeyRecord | None:
        """
        Fetch a card key that is unused or still inside its activation window.

        This is the only gate against serving a dead key. Expired keys are
        filtered out here, so callers cannot tell them apart from keys that
        never existed.

        Args:
            code: Canonical card key
            now: Epoch seconds from the authoritative clock
            window_seconds: Activation window length

        Returns:
            CardKeyRecord if live, None otherwise
        """
        sql = """
            SELECT code_key, is_used, first_used_at
            FROM card_keys
            WHERE code_key = %s
              AND (first_used_at IS NULL OR first_used_at + %s > %s)
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (code, window_seconds, now))
            row = cursor.fetchone()

        if row is None:
            return None
        return CardKeyRecord(code=row[0], is_used=bool(row[1]), first_used_at=row[2])

    def mark_used(self, code: str, used_at: int) -> bool:
        """
        Atomically transition an unused card key to used.

        The `is_used = FALSE` predicate makes this a compare-and-swap:
        only one of any number of concurrent callers changes the row.

        Args:
            code: Canonical card key
            used_at: Epoch seconds to store as first_used_at

        Returns:
            True if this call activated the key, False otherwise
        """
        sql = """
            UPDATE card_keys
            SET is_used = TRUE, first_used_at = %s
            WHERE code_key = %s AND is_used = FALSE
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (used_at, code))
            conn.commit()
            return cursor.rowcount == 1

    def insert_card_key(self, code: str) -> bool:
        """
        Insert a new unused card key.

        Uses INSERT ... ON CONFLICT DO NOTHING so an existing key
        (used or not) is never overwritten.

        Args:
            code: Canonical card key

        Returns:
            True if inserted, False if the key already exists
        """
        sql = """
            INSERT INTO card_keys (code_key, is_used, first_used_at)
            VALUES (%s, FALSE, NULL)
            ON CONFLICT (code_key) DO NOTHING
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (code,))
            conn.commit()
            return cursor.rowcount == 1


class PostgresClock:
    """
    Implements Clock protocol using the database server time.

    clock_timestamp() is used instead of NOW() so the value is the
    wall time of the call, not the start of a pooled transaction.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def now(self) -> int:
        sql = "SELECT FLOOR(EXTRACT(EPOCH FROM clock_timestamp()))::bigint"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql)
            row = cursor.fetchone()
        return int(row[0])


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
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
