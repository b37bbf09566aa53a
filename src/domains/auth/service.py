# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service orchestrating the public auth flows.

This module provides the AuthService that sequences:
- register: create a user and open a session
- login: check credentials and open a session
- logout: nothing server-side; the caller clears the cookie
- request_password_reset: email a link bound to the current password hash
- get_reset_context / reset_password: verify the link and replace the hash

Sessions are stateless tokens, so the service keeps no state between
calls. Password hashing runs in a worker thread so it never blocks the
event loop.

Example:
    >>> auth_service = AuthService(store, hasher, session_tokens, reset_tokens, notifier, settings.auth)
    >>> result = await auth_service.login("ada@example.com", "secret")
    >>> result.token
    'eyJhbGciOiJIUzI1NiIs...'
"""

import asyncio
import logging
from typing import NamedTuple

from src.core.config.settings import AuthSettings
from src.domains.auth.exceptions import (
    ConflictError,
    InternalError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from src.domains.auth.password import (
    MAX_PASSWORD_BYTES,
    PasswordHasher,
    PasswordHashError,
    password_too_long,
)
from src.domains.auth.reset_tokens import ResetTokenManager
from src.domains.auth.session_tokens import SessionTokenManager, TokenError
from src.domains.user.store import (
    CredentialStore,
    EmailAlreadyRegisteredError,
    StalePasswordHashError,
)
from src.infrastructure.database.models.user import User
from src.infrastructure.notifications.base import BaseNotifier

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Reset Your Password"
RESET_LINK_REJECTED = "Reset link expired or invalid"
PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"

RESET_EMAIL_TEMPLATE = """
<h2>Password Reset</h2>
<p>Click the link below to reset your password:</p>
<a href="{link}">{link}</a>
<p>This link expires in {minutes} minutes.</p>
"""


class AuthResult(NamedTuple):
    """Result of a successful register or login."""

    user: User
    token: str


class ResetContext(NamedTuple):
    """Values needed to render the reset-password form."""

    user_id: str
    email: str
    token: str


def normalize_email(email: str | None) -> str:
    """Trim and lower-case an email address."""
    return (email or "").strip().lower()


class AuthService:
    """Authentication flow orchestrator.

    Attributes:
        _store: Credential store.
        _password_hasher: bcrypt password hasher.
        _session_tokens: Session token manager.
        _reset_tokens: Reset token manager.
        _notifier: Delivers reset emails.
        _settings: Authentication flow settings.
    """

    def __init__(
        self,
        store: CredentialStore,
        password_hasher: PasswordHasher,
        session_tokens: SessionTokenManager,
        reset_tokens: ResetTokenManager,
        notifier: BaseNotifier,
        settings: AuthSettings,
    ) -> None:
        """Initialize the authentication service.

        Args:
            store: Credential store.
            password_hasher: Password hasher.
            session_tokens: Session token manager.
            reset_tokens: Reset token manager.
            notifier: Reset email notifier.
            settings: Authentication flow settings.
        """
        self._store = store
        self._password_hasher = password_hasher
        self._session_tokens = session_tokens
        self._reset_tokens = reset_tokens
        self._notifier = notifier
        self._settings = settings

    async def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
    ) -> AuthResult:
        """Create an account and issue a session token.

        Args:
            name: Display name.
            email: Email address (normalized before storage).
            password: Plain text password.

        Returns:
            AuthResult with the new user and a session token.

        Raises:
            ValidationError: If any field is missing or the password is
                too long.
            ConflictError: If the email is already registered.
        """
        name = (name or "").strip()
        email = normalize_email(email)
        if not name or not email or not password:
            raise ValidationError("All fields are required")
        if password_too_long(password):
            raise ValidationError(PASSWORD_TOO_LONG)

        if await self._store.find_by_email(email):
            raise ConflictError("User already exists")

        password_hash = await self._hash(password)

        try:
            user = await self._store.create(name=name, email=email, password_hash=password_hash)
        except EmailAlreadyRegisteredError as e:
            raise ConflictError("User already exists") from e

        logger.info("User registered: %s", user.id)

        return AuthResult(user=user, token=self._session_tokens.issue(user.id))

    async def login(self, email: str | None, password: str | None) -> AuthResult:
        """Check credentials and issue a session token.

        Unknown accounts and wrong passwords raise the same error.

        Args:
            email: Email address.
            password: Plain text password.

        Returns:
            AuthResult with the user and a session token.

        Raises:
            ValidationError: If email or password is missing.
            UnauthorizedError: If the credentials are invalid.
        """
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password required")

        user = await self._store.find_by_email(email)
        if not user:
            logger.warning("Login failed: no account for email %s", email)
            raise UnauthorizedError("Invalid credentials")

        if not await self._verify(password, user.password_hash):
            logger.warning("Login failed: wrong password for user %s", user.id)
            raise UnauthorizedError("Invalid credentials")

        logger.info("User logged in: %s", user.id)

        return AuthResult(user=user, token=self._session_tokens.issue(user.id))

    def logout(self, token: str | None) -> None:
        """Record a logout.

        The session token is not revoked; it stays cryptographically valid
        until it expires. Only the client copy is discarded.

        Args:
            token: Session token presented by the client, if any.
        """
        if not token:
            logger.debug("Logout without a session cookie")
            return

        try:
            claims = self._session_tokens.verify(token)
        except TokenError as e:
            logger.debug("Logout with unusable session token: %s", str(e))
            return

        logger.info("User logged out: %s", claims.user_id)

    async def request_password_reset(self, email: str | None, base_url: str) -> str | None:
        """Email a password reset link.

        Args:
            email: Email address of the account.
            base_url: Scheme and host the link points at, e.g.
                "https://shop.example.com".

        Returns:
            The reset link, or None when the email is unknown and unknown
            emails are not revealed.

        Raises:
            ValidationError: If email is missing.
            NotFoundError: If the email is unknown and unknown emails are
                revealed.
            DeliveryError: If the email could not be sent.
        """
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required")

        user = await self._store.find_by_email(email)
        if not user:
            if self._settings.reveal_unknown_email:
                raise NotFoundError("User not found")
            logger.info("Password reset requested for unknown email %s", email)
            return None

        token = self._reset_tokens.issue(user.id, user.password_hash)
        link = self.build_reset_link(base_url, user.id, token)
        logger.debug("Generated reset link: %s", link)

        minutes = int(self._reset_tokens.lifetime.total_seconds() // 60)
        await self._notifier.send(
            user.email,
            RESET_EMAIL_SUBJECT,
            RESET_EMAIL_TEMPLATE.format(link=link, minutes=minutes),
        )

        logger.info("Password reset link sent to user %s", user.id)
        return link

    async def get_reset_context(self, user_id: str, token: str) -> ResetContext:
        """Verify a reset link before showing the reset form.

        Args:
            user_id: User id from the link.
            token: Reset token from the link.

        Returns:
            ResetContext for the form.

        Raises:
            InvalidOrExpiredTokenError: If the user is unknown or the token
                does not verify.
        """
        user = await self._store.find_by_id(user_id)
        if not user:
            raise InvalidOrExpiredTokenError()

        self._reset_tokens.verify(token, user.id, user.password_hash)

        return ResetContext(user_id=user.id, email=user.email, token=token)

    async def reset_password(
        self,
        user_id: str,
        token: str,
        password: str | None,
        confirm: str | None,
    ) -> None:
        """Replace the password of the user a reset link was issued for.

        The new hash is written with a compare-and-swap on the hash the
        token was verified against, which also consumes the token.

        Args:
            user_id: User id from the link.
            token: Reset token from the link.
            password: New plain text password.
            confirm: Confirmation of the new password.

        Raises:
            ValidationError: If the passwords differ, are empty or are
                too long.
            NotFoundError: If the user is unknown.
            InvalidOrExpiredTokenError: If the token does not verify or was
                consumed concurrently.
        """
        if password != confirm:
            raise ValidationError("Passwords do not match")
        if not password:
            raise ValidationError("Password is required")
        if password_too_long(password):
            raise ValidationError(PASSWORD_TOO_LONG)

        user = await self._store.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        verified_hash = user.password_hash
        try:
            self._reset_tokens.verify(token, user.id, verified_hash)
        except InvalidOrExpiredTokenError as e:
            raise InvalidOrExpiredTokenError(RESET_LINK_REJECTED) from e

        new_hash = await self._hash(password)

        try:
            await self._store.update_password_hash(user.id, verified_hash, new_hash)
        except StalePasswordHashError as e:
            logger.warning("Concurrent password reset detected for user %s", user.id)
            raise InvalidOrExpiredTokenError(RESET_LINK_REJECTED) from e

        logger.info("Password reset completed for user %s", user.id)

    def build_reset_link(self, base_url: str, user_id: str, token: str) -> str:
        """Build the reset-password URL for a user.

        Args:
            base_url: Scheme and host, without trailing slash.
            user_id: User id.
            token: Reset token.

        Returns:
            Absolute reset-password URL.
        """
        prefix = self._settings.reset_path_prefix.rstrip("/")
        return f"{base_url.rstrip('/')}{prefix}/reset-password/{user_id}/{token}"

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self._password_hasher.hash, password)

    async def _verify(self, password: str, password_hash: str) -> bool:
        try:
            return await asyncio.to_thread(self._password_hasher.verify, password, password_hash)
        except PasswordHashError as e:
            raise InternalError("Stored credentials are corrupted") from e
