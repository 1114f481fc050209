"""
Shared fixtures for integration tests.

Requires PostgreSQL to be running (via docker-compose); tests are
skipped when the database is unreachable.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresCardKeyRepository, PostgresClock
from src.api.main import app


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresCardKeyRepository:
    """Create repository instance for each test."""
    return PostgresCardKeyRepository(pool)


@pytest.fixture
def clock(pool: ConnectionPool) -> PostgresClock:
    """Create database clock reading the shared pool."""
    return PostgresClock(pool)


@pytest.fixture
def client(pool: ConnectionPool) -> Generator[TestClient, None, None]:
    """Create test client with real database connection."""
    # Override the app's pool with our test pool
    app.state.pool = pool
    yield TestClient(app)
    app.dependency_overrides.clear()
