# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Password hashing utilities using bcrypt.

This module provides secure password hashing and verification
using the bcrypt library directly. Both operations are CPU bound and
block the calling thread; async callers should dispatch them with
asyncio.to_thread().

Example:
    >>> hasher = PasswordHasher()
    >>> hashed = hasher.hash("my_password")
    >>> hasher.verify("my_password", hashed)
    True
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10

# bcrypt only reads this many bytes of input
MAX_PASSWORD_BYTES = 72


class PasswordHashError(Exception):
    """Raised when a stored password hash cannot be parsed."""

    pass


def password_too_long(password: str) -> bool:
    """Return True if bcrypt cannot hash the password."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    """Secure password hashing using bcrypt.

    The salt and cost factor are embedded in the produced hash string,
    so verification needs nothing but the stored value.

    Attributes:
        _rounds: Number of bcrypt rounds for hashing.

    Example:
        >>> hasher = PasswordHasher(rounds=10)
        >>> hashed = hasher.hash("secure_password")
        >>> hasher.verify("secure_password", hashed)
        True
        >>> hasher.verify("wrong_password", hashed)
        False
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        """Initialize the password hasher.

        Args:
            rounds: Number of bcrypt rounds (log2 of the work factor).
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        """Return the configured bcrypt cost."""
        return self._rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password to hash.

        Returns:
            Bcrypt hash string with salt embedded.

        Raises:
            ValueError: If password is empty or longer than MAX_PASSWORD_BYTES.
        """
        if not password:
            raise ValueError("Password cannot be empty")
        if password_too_long(password):
            raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")

        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash in constant time.

        A password too long to have been hashed never matches.

        Args:
            password: Plain text password to verify.
            password_hash: Bcrypt hash to verify against.

        Returns:
            True if password matches the hash, False otherwise.

        Raises:
            PasswordHashError: If password_hash is not a valid bcrypt hash.
        """
        if not password or not password_hash or password_too_long(password):
            return False

        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError as e:
            logger.error("Stored password hash is malformed: %s", str(e))
            raise PasswordHashError("Stored password hash is malformed") from e
