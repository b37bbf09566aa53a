# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session token management utilities.

This module provides stateless session token issuance and verification
using python-jose. A session token is a JWT signed with the process-wide
secret; there is no server-side session record, so a token stays valid
until it expires. Revoking tokens early requires rotating the secret,
which invalidates every session at once.

Example:
    >>> from src.core.config import get_settings
    >>> manager = SessionTokenManager(get_settings().jwt)
    >>> token = manager.issue(user_id="user-123")
    >>> claims = manager.verify(token)
    >>> claims.user_id
    'user-123'
"""

import logging
from datetime import datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel

from src.core.config.settings import JWTSettings
from src.utils.datetime import to_timestamp, utc_from_timestamp, utc_now

logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "session"


class SessionClaims(BaseModel):
    """Decoded session token claims.

    Attributes:
        user_id: Subject of the token.
        issued_at: When the token was issued.
        expires_at: When the token stops being accepted.
    """

    user_id: str
    issued_at: datetime
    expires_at: datetime


class TokenError(Exception):
    """Base exception for session token verification."""

    pass


class TokenExpiredError(TokenError):
    """Raised when a token has expired."""

    pass


class InvalidSignatureError(TokenError):
    """Raised when a token signature does not match the secret."""

    pass


class MalformedTokenError(TokenError):
    """Raised when a token cannot be decoded or lacks required claims."""

    pass


def read_unverified_claims(token: str) -> dict[str, Any]:
    """Decode a token's claims without checking the signature.

    Args:
        token: JWT string.

    Returns:
        Claims dictionary.

    Raises:
        MalformedTokenError: If the token is not a well-formed JWT.
    """
    if not token:
        raise MalformedTokenError("Token is empty")
    try:
        return jwt.get_unverified_claims(token)
    except JoseJWTError as e:
        raise MalformedTokenError(f"Malformed token: {str(e)}") from e


class SessionTokenManager:
    """Session token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.

    Example:
        >>> manager = SessionTokenManager(settings)
        >>> token = manager.issue("user-123")
        >>> manager.verify(token).user_id
        'user-123'
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the session token manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    @property
    def lifetime(self) -> timedelta:
        """Return the session token lifetime."""
        return timedelta(days=self._settings.session_token_expire_days)

    def issue(self, user_id: str, issued_at: datetime | None = None) -> str:
        """Issue a signed session token for a user.

        Args:
            user_id: User identifier.
            issued_at: Issue time. Defaults to now.

        Returns:
            JWT session token string.
        """
        now = issued_at or utc_now()
        payload = {
            "sub": str(user_id),
            "type": SESSION_TOKEN_TYPE,
            "iat": to_timestamp(now),
            "exp": to_timestamp(now + self.lifetime),
        }

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def verify(self, token: str) -> SessionClaims:
        """Decode and validate a session token.

        Args:
            token: JWT session token string.

        Returns:
            SessionClaims with the decoded claims.

        Raises:
            MalformedTokenError: If the token cannot be decoded or is not
                a session token.
            InvalidSignatureError: If the signature does not match.
            TokenExpiredError: If the token has expired.
        """
        read_unverified_claims(token)

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JoseJWTError as e:
            logger.warning("Session token rejected: %s", str(e))
            raise InvalidSignatureError(f"Invalid token: {str(e)}") from e

        if payload.get("type") != SESSION_TOKEN_TYPE:
            raise MalformedTokenError(
                f"Expected {SESSION_TOKEN_TYPE} token, got {payload.get('type')}"
            )

        try:
            return SessionClaims(
                user_id=payload["sub"],
                issued_at=utc_from_timestamp(payload["iat"]),
                expires_at=utc_from_timestamp(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedTokenError(f"Missing or invalid claim: {str(e)}") from e
