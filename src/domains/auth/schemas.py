# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API schemas.

Request fields are all optional at the schema level. Missing or empty
values are rejected by AuthService so that every endpoint answers with
the same {"success": false, "message": ...} body. Email fields that are
present must be well-formed addresses.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator


class _EmailRequest(BaseModel):
    """Base for requests carrying an email address."""

    email: EmailStr | None = Field(default=None, description="Email address")

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, v: object) -> object:
        """Strip surrounding whitespace; a blank email counts as absent."""
        if isinstance(v, str):
            return v.strip() or None
        return v


class RegisterRequest(_EmailRequest):
    """Request to create an account."""

    name: str | None = Field(default=None, description="Display name")
    password: str | None = Field(default=None, description="Plain text password")


class LoginRequest(_EmailRequest):
    """Request to log in with email and password."""

    password: str | None = Field(default=None, description="Plain text password")


class ForgotPasswordRequest(_EmailRequest):
    """Request a password reset email."""


class ResetPasswordRequest(BaseModel):
    """Submit a new password from a reset link.

    Accepted as JSON or as a submitted HTML form.
    """

    password: str | None = Field(default=None, description="New password")
    confirm: str | None = Field(default=None, description="New password, repeated")


class MessageResponse(BaseModel):
    """Generic success envelope."""

    success: bool = Field(default=True, description="Whether the operation succeeded")
    message: str = Field(description="Human readable outcome")


class ErrorResponse(BaseModel):
    """Generic failure envelope."""

    success: bool = Field(default=False)
    message: str


class ResetContextResponse(BaseModel):
    """Data needed to render the reset-password form."""

    id: str = Field(description="User ID from the reset link")
    email: str = Field(description="Email of the account being reset")
    token: str = Field(description="Reset token from the link")
