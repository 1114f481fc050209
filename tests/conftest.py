"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Database connection pool (skips when PostgreSQL is unreachable)
- In-memory fakes for the domain ports
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from tests.helpers import CountingTokenIssuer, FakeClock, InMemoryCardKeyRepository


@pytest.fixture
def memory_repository() -> InMemoryCardKeyRepository:
    return InMemoryCardKeyRepository()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_issuer() -> CountingTokenIssuer:
    return CountingTokenIssuer()


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """
    Create connection pool for database-backed tests.

    Runs migrations once per session. Skips dependent tests when
    PostgreSQL is not reachable.
    """
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=5)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not available")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean card_keys table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM card_keys")
        conn.commit()
    yield
