# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception handlers mapping domain errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domains.auth.exceptions import AuthError
from src.domains.auth.schemas import ErrorResponse

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body"
INVALID_EMAIL_MESSAGE = "Invalid email address"


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the JSON failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render an AuthError with its status code and message."""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
    else:
        logger.info(
            "%s %s rejected (%d): %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render an unparseable request body as 400."""
    errors = exc.errors()
    logger.info("Invalid request body on %s: %s", request.url.path, errors)
    if any(error["loc"][-1:] == ("email",) for error in errors):
        return error_response(status.HTTP_400_BAD_REQUEST, INVALID_EMAIL_MESSAGE)
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain exception handlers on an application.

    Args:
        app: FastAPI application.
    """
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
