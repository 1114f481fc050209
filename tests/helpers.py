"""
Test doubles and database helpers shared across test suites.

The in-memory fakes mirror the SQL semantics of the PostgreSQL adapter:
the same live-key filter and the same compare-and-swap on is_used.
"""

import threading

from psycopg_pool import ConnectionPool

from src.domain.ports import CardKeyRecord

T0 = 1_700_000_000
WINDOW = 86400
CARD_KEY = "AAAAA-BBBBB-CCCCC-DDDDD-EEEEE"


class InMemoryCardKeyRepository:
    """
    Dict-backed CardKeyRepository.

    If `barrier` is set, every read that observes an unused key waits on it,
    forcing concurrent callers to all pass the read gate before any write.
    """

    def __init__(self, barrier: threading.Barrier | None = None) -> None:
        self.records: dict[str, CardKeyRecord] = {}
        self.barrier = barrier
        self._lock = threading.Lock()

    def find_live(self, code: str, now: int, window_seconds: int) -> CardKeyRecord | None:
        with self._lock:
            record = self.records.get(code)
        if record is None:
            return None
        if record.first_used_at is not None and record.first_used_at + window_seconds <= now:
            return None
        if self.barrier is not None and not record.is_used:
            self.barrier.wait()
        return record

    def mark_used(self, code: str, used_at: int) -> bool:
        with self._lock:
            record = self.records.get(code)
            if record is None or record.is_used:
                return False
            self.records[code] = CardKeyRecord(code=code, is_used=True, first_used_at=used_at)
            return True

    def insert_card_key(self, code: str) -> bool:
        with self._lock:
            if code in self.records:
                return False
            self.records[code] = CardKeyRecord(code=code, is_used=False)
            return True


class FakeClock:
    """Clock whose time is set by the test."""

    def __init__(self, current: int = T0) -> None:
        self.current = current

    def now(self) -> int:
        return self.current


class CountingTokenIssuer:
    """Issues distinct predictable tokens: token-1, token-2, ..."""

    def __init__(self) -> None:
        self.issued = 0
        self._lock = threading.Lock()

    def issue_token(self) -> str:
        with self._lock:
            self.issued += 1
            return f"token-{self.issued}"


def insert_card_key(
    pool: ConnectionPool, code: str, is_used: bool = False, first_used_at: int | None = None
) -> None:
    """Insert a card key row directly, bypassing the repository."""
    with pool.connection() as conn:
        conn.execute(
            "INSERT INTO card_keys (code_key, is_used, first_used_at) VALUES (%s, %s, %s)",
            (code, is_used, first_used_at),
        )
        conn.commit()


def fetch_card_key(pool: ConnectionPool, code: str) -> tuple | None:
    """Return (is_used, first_used_at) for a stored card key."""
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute(
            "SELECT is_used, first_used_at FROM card_keys WHERE code_key = %s", (code,)
        )
        return cursor.fetchone()


def database_now(pool: ConnectionPool) -> int:
    """Current database time in epoch seconds."""
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute("SELECT FLOOR(EXTRACT(EPOCH FROM clock_timestamp()))::bigint")
        return int(cursor.fetchone()[0])
