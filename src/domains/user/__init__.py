# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User domain package.

This package provides credential persistence:
- CredentialStore: contract used by the authentication flows
- SQLCredentialStore: implementation on the users table

Example:
    >>> from src.domains.user import SQLCredentialStore
    >>> store = SQLCredentialStore(db)
    >>> user = await store.find_by_email("ada@example.com")
"""

from src.domains.user.store import (
    CredentialStore,
    CredentialStoreError,
    EmailAlreadyRegisteredError,
    SQLCredentialStore,
    StalePasswordHashError,
)

__all__ = [
    "CredentialStore",
    "CredentialStoreError",
    "EmailAlreadyRegisteredError",
    "SQLCredentialStore",
    "StalePasswordHashError",
]
