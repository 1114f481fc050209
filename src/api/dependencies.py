"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresCardKeyRepository, PostgresClock
from src.adapters.session.secrets_issuer import SecretsSessionTokenIssuer
from src.config.settings import get_settings
from src.domain.activation import ActivationService

# Module-level singleton - SecretsSessionTokenIssuer is stateless
_token_issuer = SecretsSessionTokenIssuer()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresCardKeyRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresCardKeyRepository(pool)


def get_clock(request: Request) -> PostgresClock:
    """Create database-backed clock, the single authoritative time source."""
    pool = get_pool(request)
    return PostgresClock(pool)


def get_token_issuer() -> SecretsSessionTokenIssuer:
    """Get session token issuer (singleton)."""
    return _token_issuer


def get_activation_service(request: Request) -> ActivationService:
    """
    Create activation service with injected dependencies.

    Wires together the repository, clock and token issuer, with the
    activation window taken from settings.
    """
    return ActivationService(
        repository=get_repository(request),
        clock=get_clock(request),
        token_issuer=get_token_issuer(),
        window_seconds=get_settings().activation_window_seconds,
    )
