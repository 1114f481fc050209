"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, Field

from src.domain.activation import CARD_KEY_PATTERN


class ActivateRequest(BaseModel):
    """Request model for card key activation."""

    card_key: str = Field(
        ...,
        alias="cardKey",
        pattern=CARD_KEY_PATTERN,
        description="Card key in XXXXX-XXXXX-XXXXX-XXXXX-XXXXX format (uppercase A-Z, 0-9)",
    )


class ActivationResponse(BaseModel):
    """
    Response model for activation outcomes.

    expires_in is set for valid outcomes, message for rejections.
    """

    valid: bool
    code: str
    expires_in: int | None = Field(None, description="Session lifetime in seconds")
    message: str | None = None


class ErrorResponse(BaseModel):
    """Error response model for INVALID_INPUT and SERVER_ERROR."""

    valid: bool = False
    code: str
    message: str
