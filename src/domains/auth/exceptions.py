# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication error taxonomy.

Every failure of an authentication flow is raised as an AuthError subclass.
Each class carries the HTTP status it maps to and a message that is safe to
show to the client; the API layer renders them without further inspection.
"""


class AuthError(Exception):
    """Base exception for authentication flow errors.

    Attributes:
        status_code: HTTP status the error maps to.
        message: Client-facing message.
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Raised when required fields are missing or malformed."""

    status_code = 400
    default_message = "All fields are required"


class ConflictError(AuthError):
    """Raised when registering an email that already exists."""

    status_code = 409
    default_message = "User already exists"


class UnauthorizedError(AuthError):
    """Raised on bad login credentials.

    The same message is used whether the account is unknown or the
    password is wrong.
    """

    status_code = 401
    default_message = "Invalid credentials"


class NotFoundError(AuthError):
    """Raised when a user id or email does not exist."""

    status_code = 404
    default_message = "User not found"


class InvalidOrExpiredTokenError(AuthError):
    """Raised when a reset token fails verification for any reason."""

    status_code = 400
    default_message = "Reset link is invalid or expired"


class DeliveryError(AuthError):
    """Raised when the reset email could not be delivered."""

    status_code = 500
    default_message = "Failed to send email"


class InternalError(AuthError):
    """Raised for unexpected failures inside an authentication flow."""

    status_code = 500
