"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition and enumeration tests.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresCardKeyRepository, PostgresClock
from src.adapters.session.secrets_issuer import SecretsSessionTokenIssuer
from src.api.main import app
from src.domain.activation import ActivationService
from tests.helpers import WINDOW

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresCardKeyRepository:
    """Create repository instance for each test."""
    return PostgresCardKeyRepository(pool)


@pytest.fixture
def service(pool: ConnectionPool) -> ActivationService:
    """Activation service wired to the real database and clock."""
    return ActivationService(
        repository=PostgresCardKeyRepository(pool),
        clock=PostgresClock(pool),
        token_issuer=SecretsSessionTokenIssuer(),
        window_seconds=WINDOW,
    )


@pytest.fixture
def client(pool: ConnectionPool) -> Generator[TestClient, None, None]:
    """Create test client with real database connection."""
    app.state.pool = pool
    yield TestClient(app)
