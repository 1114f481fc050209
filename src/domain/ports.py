"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class CardKeyState(str, Enum):
    """
    Card key lifecycle states.

    State Transitions (forward-only):
    - UNUSED -> ACTIVE (first successful activation)
    - ACTIVE -> ACTIVE (renewal, no stored change)
    - ACTIVE -> EXPIRED (activation window elapsed)

    Terminal States:
    - EXPIRED: No outgoing transition, the key is permanently dead

    Note: Only UNUSED and "used" are stored. ACTIVE vs EXPIRED is derived
    from first_used_at + window at read time.
    """

    UNUSED = "UNUSED"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"


class ActivationResult(str, Enum):
    """
    Result of a card key activation attempt.

    Values double as the `code` field of the HTTP response body.
    """

    INVALID_CARD = "INVALID_CARD"
    CARD_EXPIRED = "CARD_EXPIRED"
    ACTIVATION_SUCCESS = "ACTIVATION_SUCCESS"
    SESSION_RENEWED = "SESSION_RENEWED"


@dataclass(frozen=True)
class CardKeyRecord:
    """Snapshot of one card_keys row."""

    code: str
    is_used: bool
    first_used_at: int | None = None

    def expires_at(self, window_seconds: int) -> int | None:
        """Epoch second at which the key dies, or None if never activated."""
        if self.first_used_at is None:
            return None
        return self.first_used_at + window_seconds

    def state_at(self, now: int, window_seconds: int) -> CardKeyState:
        expires_at = self.expires_at(window_seconds)
        if expires_at is None:
            return CardKeyState.UNUSED
        if now > expires_at:
            return CardKeyState.EXPIRED
        return CardKeyState.ACTIVE


class CardKeyRepository(Protocol):
    """Port interface for card key persistence."""

    def find_live(self, code: str, now: int, window_seconds: int) -> CardKeyRecord | None:
        """
        Fetch a card key that is unused or still inside its window.

        The filter is `first_used_at IS NULL OR first_used_at + window > now`.
        Keys that never existed and keys whose window has closed both
        return None.

        Args:
            code: Canonical card key
            now: Current epoch seconds from the authoritative clock
            window_seconds: Activation window length

        Returns:
            CardKeyRecord if the key is live, None otherwise
        """
        ...

    def mark_used(self, code: str, used_at: int) -> bool:
        """
        Atomically mark an unused card key as used.

        Must be a single conditional write scoped to `is_used = FALSE`
        (compare-and-swap), never a read followed by a separate write.

        Args:
            code: Canonical card key
            used_at: Epoch seconds to stamp as first_used_at

        Returns:
            True if this call activated the key, False if it was
            already used (or does not exist)
        """
        ...

    def insert_card_key(self, code: str) -> bool:
        """
        Insert a new unused card key.

        Args:
            code: Canonical card key

        Returns:
            True if inserted, False if the code already exists
        """
        ...


class Clock(Protocol):
    """Port interface for the authoritative time source."""

    def now(self) -> int:
        """Return current time as integer epoch seconds."""
        ...


class SessionTokenIssuer(Protocol):
    """Port interface for session credential generation."""

    def issue_token(self) -> str:
        """Return a new opaque, unguessable session identifier."""
        ...
