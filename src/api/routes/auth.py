# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for user authentication:
- POST /register - Create an account and start a session
- POST /login - Start a session
- POST /logout - Discard the session cookie
- POST /forgot-password - Email a password reset link
- GET /reset-password/{user_id}/{token} - Check a reset link
- POST /reset-password/{user_id}/{token} - Set a new password

Sessions travel in an HttpOnly cookie. The reset-password endpoints
answer with plain text bodies, except that a valid link opened in a
browser gets an HTML form which posts back to the same URL.

Example:
    POST /api/auth/login
    Body:
        {"email": "ada@example.com", "password": "secret"}
"""

import html
import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.formparsers import MultiPartException

from src.api.cookies import SessionCookieTransport
from src.api.dependencies import get_auth_service, get_cookie_transport
from src.api.errors import INVALID_BODY_MESSAGE
from src.core.config import get_settings
from src.domains.auth.exceptions import AuthError, ValidationError
from src.domains.auth.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetContextResponse,
    ResetPasswordRequest,
)
from src.domains.auth.service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()

RESET_SUCCESS_MESSAGE = "Password reset successful. You can now login."

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

RESET_FORM_TEMPLATE = """<!DOCTYPE html>
<html>
<head><title>Reset Password</title></head>
<body>
<h2>Reset password for {email}</h2>
<form method="post" action="{action}">
<input type="password" name="password" placeholder="New password" required>
<input type="password" name="confirm" placeholder="Confirm password" required>
<button type="submit">Reset Password</button>
</form>
</body>
</html>
"""


def _request_base_url(request: Request) -> str:
    """Scheme and host the reset link should point at.

    Args:
        request: HTTP request.

    Returns:
        Base URL without trailing slash.
    """
    configured = get_settings().auth.public_base_url
    if configured:
        return configured.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"


def _plain_text_error(error: AuthError) -> PlainTextResponse:
    return PlainTextResponse(error.message, status_code=error.status_code)


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(
    data: RegisterRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    cookies: SessionCookieTransport = Depends(get_cookie_transport),
) -> MessageResponse:
    """Create an account and set the session cookie."""
    result = await auth_service.register(data.name, data.email, data.password)
    cookies.attach(response, result.token)
    return MessageResponse(message="User registered successfully")


@router.post(
    "/login",
    response_model=MessageResponse,
    summary="Log in with email and password",
)
async def login(
    data: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    cookies: SessionCookieTransport = Depends(get_cookie_transport),
) -> MessageResponse:
    """Check credentials and set the session cookie.

    Unknown emails and wrong passwords both answer 401 with the same
    message.
    """
    result = await auth_service.login(data.email, data.password)
    cookies.attach(response, result.token)
    return MessageResponse(message="Login successful")


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
)
async def logout(
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    cookies: SessionCookieTransport = Depends(get_cookie_transport),
) -> MessageResponse:
    """Clear the session cookie.

    The token itself is not revoked and remains valid until it expires.
    """
    auth_service.logout(cookies.read(request))
    cookies.clear(response)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request a password reset email",
)
async def forgot_password(
    data: ForgotPasswordRequest,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Email a reset link valid for five minutes."""
    await auth_service.request_password_reset(data.email, _request_base_url(request))
    return MessageResponse(message="Password reset link sent to email")


@router.get(
    "/reset-password/{user_id}/{token}",
    response_model=ResetContextResponse,
    summary="Check a password reset link",
)
async def get_reset_password(
    user_id: str,
    token: str,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> ResetContextResponse | HTMLResponse | PlainTextResponse:
    """Return the reset form, or a plain text error.

    Browsers asking for text/html get a form that posts back to the same
    link. Other clients get the form values as JSON.
    """
    try:
        context = await auth_service.get_reset_context(user_id, token)
    except AuthError as e:
        logger.info("Reset link rejected for user %s: %s", user_id, e.message)
        return _plain_text_error(e)

    if "text/html" in request.headers.get("accept", ""):
        return HTMLResponse(
            RESET_FORM_TEMPLATE.format(
                action=html.escape(request.url.path, quote=True),
                email=html.escape(context.email),
            )
        )

    return ResetContextResponse(id=context.user_id, email=context.email, token=context.token)


async def _read_reset_body(request: Request) -> ResetPasswordRequest:
    """Parse the new password from a form submission or a JSON body.

    Raises:
        ValidationError: If the body cannot be parsed.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            return ResetPasswordRequest.model_validate(
                {field: form.get(field) for field in ("password", "confirm")}
            )
        return ResetPasswordRequest.model_validate(await request.json())
    except (ValueError, PydanticValidationError, MultiPartException) as e:
        raise ValidationError(INVALID_BODY_MESSAGE) from e


@router.post(
    "/reset-password/{user_id}/{token}",
    response_class=PlainTextResponse,
    summary="Set a new password from a reset link",
)
async def post_reset_password(
    user_id: str,
    token: str,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> PlainTextResponse:
    """Replace the password. The link stops working once this succeeds.

    The body is either the submitted reset form or JSON with the same
    fields. Every outcome, including an unparseable body, is plain text.
    """
    try:
        data = await _read_reset_body(request)
        await auth_service.reset_password(user_id, token, data.password, data.confirm)
    except AuthError as e:
        logger.info("Password reset rejected for user %s: %s", user_id, e.message)
        return _plain_text_error(e)

    return PlainTextResponse(RESET_SUCCESS_MESSAGE)
