"""
Provisioning domain service - creation of unused card keys.

Keys are created with is_used = false and first_used_at = NULL.
Provisioning never touches keys that already exist.
"""

import logging
from dataclasses import dataclass

from .activation import generate_card_key, is_canonical_card_key
from .exceptions import CardKeyAlreadyProvisioned, InvalidCardKeyFormat
from .ports import CardKeyRepository

logger = logging.getLogger(__name__)

# Collisions in a 36^25 space are not expected; the bound only guards a broken generator
MAX_GENERATION_ATTEMPTS = 5


@dataclass
class ProvisioningService:
    """Domain service for issuing new card keys."""

    repository: CardKeyRepository

    def provision(self, count: int) -> list[str]:
        """
        Generate and store `count` fresh card keys.

        Args:
            count: Number of keys to create (must be positive)

        Returns:
            The newly stored card keys, in creation order

        Raises:
            ValueError: If count is not positive
            RuntimeError: If a unique key could not be generated
        """
        if count <= 0:
            raise ValueError("count must be positive")

        codes = [self._provision_one() for _ in range(count)]
        logger.info("Provisioned %d card key(s)", len(codes))
        return codes

    def import_key(self, code: str) -> str:
        """
        Store an externally supplied card key.

        Args:
            code: Card key (will be normalized)

        Returns:
            Normalized card key

        Raises:
            InvalidCardKeyFormat: If the code is not canonical after normalization
            CardKeyAlreadyProvisioned: If the code already exists
        """
        normalized = self._normalize_code(code)
        if not is_canonical_card_key(normalized):
            raise InvalidCardKeyFormat(normalized)

        if not self.repository.insert_card_key(normalized):
            raise CardKeyAlreadyProvisioned(normalized)
        return normalized

    def _provision_one(self) -> str:
        for _ in range(MAX_GENERATION_ATTEMPTS):
            code = generate_card_key()
            if self.repository.insert_card_key(code):
                return code
            logger.warning("Generated card key collided with an existing key, retrying")
        raise RuntimeError("Could not generate a unique card key")

    def _normalize_code(self, code: str) -> str:
        """
        Normalize a card key for consistent storage and lookup.

        Applies: strip whitespace + uppercase
        """
        return code.strip().upper()
