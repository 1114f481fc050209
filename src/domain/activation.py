"""
Activation domain service - card key activation and session renewal.

Card Key State Machine (Forward-Only Transitions)
=================================================

States:
- UNUSED: Provisioned, never activated (is_used = false, first_used_at = NULL)
- ACTIVE: Activated, now <= first_used_at + window
- EXPIRED: Terminal, now > first_used_at + window

Valid Transitions:
    UNUSED -> ACTIVE    (first activation, single conditional write)
    ACTIVE -> ACTIVE    (renewal, read-only, window NOT extended)
    ACTIVE -> EXPIRED   (time passes, no write)

Invalid Transitions (never allowed):
    EXPIRED -> any      (EXPIRED is terminal)
    any -> UNUSED       (is_used is never cleared)

Time Source
===========
The clock is read exactly once per resolve() call. The same value is used
for the live-key filter, the first_used_at stamp and the remaining-time
arithmetic, so the activation window cannot drift between read and write.
"""

import logging
import re
import secrets
from dataclasses import dataclass

from .ports import (
    ActivationResult,
    CardKeyRecord,
    CardKeyRepository,
    CardKeyState,
    Clock,
    SessionTokenIssuer,
)

logger = logging.getLogger(__name__)

CARD_KEY_PATTERN = r"^[A-Z0-9]{5}-[A-Z0-9]{5}-[A-Z0-9]{5}-[A-Z0-9]{5}-[A-Z0-9]{5}$"
CARD_KEY_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

_CARD_KEY_RE = re.compile(CARD_KEY_PATTERN)


def is_canonical_card_key(code: str) -> bool:
    """Check a code against the canonical 5x5 format."""
    return _CARD_KEY_RE.fullmatch(code) is not None


def mask_card_key(code: str) -> str:
    """Redact a card key for logging, keeping only its first group."""
    return code.split("-", 1)[0] + "-*****"


def generate_card_key() -> str:
    """
    Generate a cryptographically random canonical card key.

    Uses secrets module for cryptographic randomness.
    """
    groups = ("".join(secrets.choice(CARD_KEY_ALPHABET) for _ in range(5)) for _ in range(5))
    return "-".join(groups)


@dataclass(frozen=True)
class ActivationOutcome:
    """
    Structured result of resolve().

    expires_in and session_token are only set for valid outcomes.
    """

    result: ActivationResult
    expires_in: int | None = None
    session_token: str | None = None

    @property
    def valid(self) -> bool:
        return self.result in (ActivationResult.ACTIVATION_SUCCESS, ActivationResult.SESSION_RENEWED)


@dataclass
class ActivationService:
    """
    Domain service for card key activation.

    Orchestrates the activation flow: clock read, live-key lookup,
    first-use conditional write, and session token issuance.
    """

    repository: CardKeyRepository
    clock: Clock
    token_issuer: SessionTokenIssuer
    window_seconds: int = 86400

    def resolve(self, code: str) -> ActivationOutcome:
        """
        Validate a card key and grant a session.

        Args:
            code: Canonical card key (already validated at the boundary)

        Returns:
            ActivationOutcome with one of INVALID_CARD, CARD_EXPIRED,
            ACTIVATION_SUCCESS or SESSION_RENEWED

        Store failures are not caught here; they propagate to the caller.
        """
        now = self.clock.now()

        record = self.repository.find_live(code, now, self.window_seconds)
        if record is None:
            # Unknown and expired keys are deliberately indistinguishable
            logger.info("Card key rejected: %s (invalid or expired)", mask_card_key(code))
            return ActivationOutcome(ActivationResult.INVALID_CARD)

        if not record.is_used:
            if self.repository.mark_used(code, now):
                logger.info(
                    "Card key activated: %s, expires at %d",
                    mask_card_key(code),
                    now + self.window_seconds,
                )
                return ActivationOutcome(
                    ActivationResult.ACTIVATION_SUCCESS,
                    expires_in=self.window_seconds,
                    session_token=self.token_issuer.issue_token(),
                )

            # Lost the compare-and-swap to a concurrent activation
            logger.info(
                "Card key %s activated concurrently, falling back to renewal", mask_card_key(code)
            )
            record = self.repository.find_live(code, now, self.window_seconds)
            if record is None or not record.is_used:
                return ActivationOutcome(ActivationResult.INVALID_CARD)

        return self._renew(record, now)

    def _renew(self, record: CardKeyRecord, now: int) -> ActivationOutcome:
        """
        Re-derive a session for an already activated key.

        Never writes to the store and never extends the window.
        """
        expires_at = record.expires_at(self.window_seconds)
        remaining = expires_at - now if expires_at is not None else 0
        # A concurrent winner may have stamped a later clock reading than ours
        remaining = min(remaining, self.window_seconds)

        # remaining can hit 0 at exactly expires_at, which the state check still calls ACTIVE
        if record.state_at(now, self.window_seconds) == CardKeyState.EXPIRED or remaining <= 0:
            logger.info(
                "Card key expired: %s, expired at %s", mask_card_key(record.code), expires_at
            )
            return ActivationOutcome(ActivationResult.CARD_EXPIRED)

        logger.info(
            "Session renewed: %s, %d seconds remaining", mask_card_key(record.code), remaining
        )
        return ActivationOutcome(
            ActivationResult.SESSION_RENEWED,
            expires_in=remaining,
            session_token=self.token_issuer.issue_token(),
        )
