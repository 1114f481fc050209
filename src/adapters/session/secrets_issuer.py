"""
Secrets-based session token issuer - Implements SessionTokenIssuer protocol.

This module provides the session credential generator used for the
session cookie set on successful activation and renewal.
"""

import logging
import secrets

logger = logging.getLogger(__name__)

# 32 bytes of entropy, ~43 URL-safe characters
TOKEN_BYTES = 32


class SecretsSessionTokenIssuer:
    """
    Implements SessionTokenIssuer protocol via the secrets module.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Tokens are opaque: they carry no card key, timestamp or other data.
    """

    def issue_token(self) -> str:
        """
        Generate a new URL-safe session token.

        The token value is never logged.
        """
        token = secrets.token_urlsafe(TOKEN_BYTES)
        logger.debug("[SESSION] Issued session token (%d chars)", len(token))
        return token
