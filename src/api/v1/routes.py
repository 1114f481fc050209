"""
API v1 routes.

Defines REST endpoints for the Card Key Activation API.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_activation_service
from src.api.errors import SERVER_ERROR_MESSAGE
from src.api.models import ActivateRequest, ActivationResponse, ErrorResponse
from src.config.settings import Settings, get_settings
from src.domain.activation import ActivationService, mask_card_key
from src.domain.ports import ActivationResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])

# Client-visible messages for rejected card keys
REJECTION_MESSAGES = {
    ActivationResult.INVALID_CARD: "Card key is invalid or expired",
    ActivationResult.CARD_EXPIRED: "Card key has expired",
}


@router.post(
    "/activate",
    response_model=ActivationResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed card key (INVALID_INPUT)"},
        500: {"model": ErrorResponse, "description": "Store failure (SERVER_ERROR)"},
    },
    summary="Activate or renew a card key",
    description="Submit a card key. The first use starts its activation window; "
    "later uses within the window renew the session for the remaining time. "
    "Rejections (INVALID_CARD, CARD_EXPIRED) are returned with HTTP 200 and valid=false.",
)
def activate(
    request_data: ActivateRequest,
    response: Response,
    service: ActivationService = Depends(get_activation_service),
    settings: Settings = Depends(get_settings),
) -> ActivationResponse | JSONResponse:
    """
    Validate a card key and set a session cookie on success.

    - **cardKey**: Card key in XXXXX-XXXXX-XXXXX-XXXXX-XXXXX format

    On valid outcomes the session cookie Max-Age equals expires_in.
    """
    try:
        outcome = service.resolve(request_data.card_key)
    except Exception:
        # Full detail stays in server logs; the client only gets a generic message
        logger.exception("Card key validation failed: %s", mask_card_key(request_data.card_key))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"valid": False, "code": "SERVER_ERROR", "message": SERVER_ERROR_MESSAGE},
        )

    if not outcome.valid:
        return ActivationResponse(
            valid=False,
            code=outcome.result.value,
            message=REJECTION_MESSAGES[outcome.result],
        )

    response.set_cookie(
        key=settings.session_cookie_name,
        value=outcome.session_token,
        max_age=outcome.expires_in,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
    )
    return ActivationResponse(valid=True, code=outcome.result.value, expires_in=outcome.expires_in)
