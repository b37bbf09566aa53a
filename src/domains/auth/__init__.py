# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

This module provides the authentication token lifecycle:
- Password hashing with bcrypt
- Stateless session tokens
- Password reset tokens bound to the current password hash
- The AuthService orchestrating register, login, logout and reset flows
  (import it from src.domains.auth.service)

Exports:
    PasswordHasher: Secure password hashing using bcrypt.
    SessionTokenManager: Session token issuance and verification.
    ResetTokenManager: Self-invalidating reset token issuance and verification.
"""

from src.domains.auth.password import PasswordHasher
from src.domains.auth.reset_tokens import ResetTokenManager
from src.domains.auth.session_tokens import SessionTokenManager

__all__ = [
    "PasswordHasher",
    "SessionTokenManager",
    "ResetTokenManager",
]
