"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for card key activation.
It defines its own port interfaces for infrastructure abstraction,
ensuring true hexagonal architecture decoupling.
"""

from .activation import (
    CARD_KEY_PATTERN,
    ActivationOutcome,
    ActivationService,
    generate_card_key,
    is_canonical_card_key,
    mask_card_key,
)
from .exceptions import CardKeyAlreadyProvisioned, CardKeyError, InvalidCardKeyFormat
from .ports import (
    ActivationResult,
    CardKeyRecord,
    CardKeyRepository,
    CardKeyState,
    Clock,
    SessionTokenIssuer,
)
from .provisioning import ProvisioningService

__all__ = [
    "CARD_KEY_PATTERN",
    "ActivationOutcome",
    "ActivationResult",
    "ActivationService",
    "CardKeyAlreadyProvisioned",
    "CardKeyError",
    "CardKeyRecord",
    "CardKeyRepository",
    "CardKeyState",
    "Clock",
    "InvalidCardKeyFormat",
    "ProvisioningService",
    "SessionTokenIssuer",
    "generate_card_key",
    "is_canonical_card_key",
    "mask_card_key",
]
