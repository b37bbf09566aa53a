# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for password hashing utilities.

Tests the PasswordHasher class.
"""

import pytest

from src.domains.auth.password import (
    DEFAULT_ROUNDS,
    MAX_PASSWORD_BYTES,
    PasswordHasher,
    PasswordHashError,
    password_too_long,
)


class TestPasswordHasher:
    """Tests for PasswordHasher class."""

    def test_hash_password_returns_bcrypt_hash(self) -> None:
        """Test that hashing returns a bcrypt hash string."""
        hasher = PasswordHasher(rounds=4)
        password = "test_password_123"

        hashed = hasher.hash(password)

        assert isinstance(hashed, str)
        assert hashed.startswith("$2b$04$")  # bcrypt prefix and cost
        assert len(hashed) == 60  # bcrypt hash length

    def test_default_rounds(self) -> None:
        """Test that the default work factor is 10."""
        assert PasswordHasher().rounds == DEFAULT_ROUNDS == 10

    def test_hash_produces_different_hashes_for_same_password(self) -> None:
        """Test that hashing the same password produces different hashes (due to salt)."""
        hasher = PasswordHasher(rounds=4)
        password = "test_password_123"

        hash1 = hasher.hash(password)
        hash2 = hasher.hash(password)

        assert hash1 != hash2

    def test_verify_correct_password(self) -> None:
        """Test that verification succeeds with correct password."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("correct_password")

        assert hasher.verify("correct_password", hashed) is True

    def test_verify_incorrect_password(self) -> None:
        """Test that verification fails with incorrect password."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("correct_password")

        assert hasher.verify("wrong_password", hashed) is False

    def test_verify_across_cost_factors(self) -> None:
        """Test that a hash made at one cost verifies with a hasher at another."""
        hashed = PasswordHasher(rounds=5).hash("password")

        assert PasswordHasher(rounds=4).verify("password", hashed) is True

    def test_verify_empty_password_returns_false(self) -> None:
        """Test that verification fails with empty password."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("valid_password")

        assert hasher.verify("", hashed) is False

    def test_verify_empty_hash_returns_false(self) -> None:
        """Test that verification fails with empty hash."""
        hasher = PasswordHasher(rounds=4)

        assert hasher.verify("password", "") is False

    def test_verify_malformed_hash_raises_error(self) -> None:
        """Test that a malformed stored hash is an error, not a mismatch."""
        hasher = PasswordHasher(rounds=4)

        with pytest.raises(PasswordHashError):
            hasher.verify("password", "not_a_valid_bcrypt_hash")

    def test_hash_empty_password_raises_error(self) -> None:
        """Test that hashing empty password raises ValueError."""
        hasher = PasswordHasher(rounds=4)

        with pytest.raises(ValueError, match="Password cannot be empty"):
            hasher.hash("")

    def test_hash_password_over_byte_limit_raises_error(self) -> None:
        """Test that a password bcrypt cannot take is rejected before hashing."""
        hasher = PasswordHasher(rounds=4)

        with pytest.raises(ValueError, match="longer than 72 bytes"):
            hasher.hash("x" * (MAX_PASSWORD_BYTES + 1))

    def test_hash_password_at_byte_limit(self) -> None:
        hasher = PasswordHasher(rounds=4)
        password = "x" * MAX_PASSWORD_BYTES

        assert hasher.verify(password, hasher.hash(password)) is True

    def test_verify_password_over_byte_limit_returns_false(self) -> None:
        """Test that an overlong password is a mismatch, not a hash error."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("x" * MAX_PASSWORD_BYTES)

        assert hasher.verify("x" * (MAX_PASSWORD_BYTES + 8), hashed) is False


class TestPasswordTooLong:
    """Tests for password_too_long."""

    def test_counts_utf8_bytes(self) -> None:
        """Test that multi-byte characters count by encoded length."""
        assert password_too_long("é" * 36) is False
        assert password_too_long("é" * 37) is True

    def test_ascii_limit(self) -> None:
        assert password_too_long("a" * 72) is False
        assert password_too_long("a" * 73) is True
