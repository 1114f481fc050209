"""
Domain exceptions - Semantic error types for card keys.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Activation outcomes (invalid, expired) are NOT exceptions; they are
returned as ActivationResult values. These exceptions cover provisioning.
"""


class CardKeyError(Exception):
    """Base class for card key domain errors."""

    pass


class InvalidCardKeyFormat(CardKeyError):
    """Code does not match the canonical XXXXX-XXXXX-XXXXX-XXXXX-XXXXX format."""

    pass


class CardKeyAlreadyProvisioned(CardKeyError):
    """Code already exists in the store."""

    pass
