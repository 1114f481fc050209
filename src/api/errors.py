"""
Exception handlers - map framework errors to the activation response shape.

Validation failures become INVALID_INPUT (HTTP 400) instead of FastAPI's
default 422 body. Unhandled exceptions become a generic SERVER_ERROR.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "An error occurred while validating the card key"


def format_validation_errors(errors: list[dict]) -> str:
    """
    Render pydantic errors as "<field>: <message>" joined by "; ".

    The leading "body" location segment is dropped.
    """
    details = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        details.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "; ".join(details)


def register_exception_handlers(app: FastAPI) -> None:
    """Register INVALID_INPUT and SERVER_ERROR handlers on the application."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = format_validation_errors(exc.errors())
        logger.info("Input validation error: %s", details)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "valid": False,
                "code": "INVALID_INPUT",
                "message": f"Invalid card key format: {details}",
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error: %s", exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "valid": False,
                "code": "SERVER_ERROR",
                "message": SERVER_ERROR_MESSAGE,
            },
        )
