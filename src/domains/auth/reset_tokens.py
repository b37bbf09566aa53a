# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Self-invalidating password reset tokens.

A reset token is an HS256 (HMAC-SHA256) JWT over {sub, type, iat, exp}
whose signing key is derived per user:

    key = reset_secret + current_password_hash

Verification recomputes the key from the password hash stored *now*. As
soon as the password changes, the key changes with it and every link
issued against the old hash stops verifying. No reset record is stored;
the token string is the only artifact.

Every verification failure (bad signature, expiry, changed hash, foreign
user id) is reported as the same InvalidOrExpiredTokenError so callers
cannot tell the cases apart.

Example:
    >>> manager = ResetTokenManager(settings.jwt)
    >>> token = manager.issue("user-123", user.password_hash)
    >>> manager.verify(token, "user-123", user.password_hash)
    ResetClaims(user_id='user-123', ...)
"""

import logging
from datetime import datetime, timedelta

from jose import JWTError as JoseJWTError, jwt
from pydantic import BaseModel

from src.core.config.settings import JWTSettings
from src.domains.auth.exceptions import InvalidOrExpiredTokenError
from src.utils.datetime import to_timestamp, utc_from_timestamp, utc_now

logger = logging.getLogger(__name__)

RESET_TOKEN_TYPE = "password_reset"


class ResetClaims(BaseModel):
    """Decoded password reset token claims.

    Attributes:
        user_id: User the reset link was issued for.
        expires_at: When the link stops being accepted.
    """

    user_id: str
    expires_at: datetime


class ResetTokenManager:
    """Issues and verifies password reset tokens bound to a password hash.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the reset token manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    @property
    def lifetime(self) -> timedelta:
        """Return the reset token lifetime."""
        return timedelta(minutes=self._settings.reset_token_expire_minutes)

    def _derive_key(self, password_hash: str) -> str:
        return self._settings.reset_secret + password_hash

    def issue(
        self,
        user_id: str,
        current_password_hash: str,
        issued_at: datetime | None = None,
    ) -> str:
        """Issue a reset token bound to the user's current password hash.

        Args:
            user_id: User identifier.
            current_password_hash: Password hash stored for the user right now.
            issued_at: Issue time. Defaults to now.

        Returns:
            JWT reset token string.
        """
        now = issued_at or utc_now()
        payload = {
            "sub": str(user_id),
            "type": RESET_TOKEN_TYPE,
            "iat": to_timestamp(now),
            "exp": to_timestamp(now + self.lifetime),
        }

        return jwt.encode(
            payload,
            self._derive_key(current_password_hash),
            algorithm=self._settings.algorithm,
        )

    def verify(
        self,
        token: str,
        user_id: str,
        current_password_hash: str,
    ) -> ResetClaims:
        """Verify a reset token against the user's current password hash.

        Args:
            token: JWT reset token string.
            user_id: User id taken from the reset link.
            current_password_hash: Password hash stored for the user right now.

        Returns:
            ResetClaims for the verified token.

        Raises:
            InvalidOrExpiredTokenError: If the token does not verify for any
                reason.
        """
        if not token:
            raise InvalidOrExpiredTokenError()

        try:
            payload = jwt.decode(
                token,
                self._derive_key(current_password_hash),
                algorithms=[self._settings.algorithm],
            )
        except JoseJWTError as e:
            logger.info("Reset token rejected for user %s: %s", user_id, str(e))
            raise InvalidOrExpiredTokenError() from e

        if payload.get("type") != RESET_TOKEN_TYPE or payload.get("sub") != str(user_id):
            logger.warning("Reset token claims do not match link for user %s", user_id)
            raise InvalidOrExpiredTokenError()

        try:
            return ResetClaims(
                user_id=payload["sub"],
                expires_at=utc_from_timestamp(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidOrExpiredTokenError() from e
