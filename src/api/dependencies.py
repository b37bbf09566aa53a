# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Build the credential store, token managers and notifier from settings
- Assemble the AuthService for a request

Tests replace get_credential_store and get_notifier through
app.dependency_overrides.

Example:
    @router.post("/login")
    async def login(
        data: LoginRequest,
        auth_service: AuthService = Depends(get_auth_service),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.cookies import SessionCookieTransport
from src.core.config import get_settings
from src.domains.auth.password import PasswordHasher
from src.domains.auth.reset_tokens import ResetTokenManager
from src.domains.auth.service import AuthService
from src.domains.auth.session_tokens import SessionTokenManager
from src.domains.user.store import CredentialStore, SQLCredentialStore
from src.infrastructure.database.connection import get_session
from src.infrastructure.notifications.base import BaseNotifier
from src.infrastructure.notifications.email import EmailNotifier

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session.

    The session commits when the request handler returns normally and
    rolls back when it raises.

    Yields:
        AsyncSession for the credential store database.
    """
    async with get_session() as session:
        yield session


def get_credential_store(db: AsyncSession = Depends(get_db)) -> CredentialStore:
    """Get the credential store bound to the request session.

    Args:
        db: Database session.

    Returns:
        CredentialStore.
    """
    return SQLCredentialStore(db)


def get_password_hasher() -> PasswordHasher:
    """Get password hasher instance.

    Returns:
        PasswordHasher using the configured bcrypt cost.
    """
    return PasswordHasher(rounds=get_settings().auth.bcrypt_rounds)


def get_session_token_manager() -> SessionTokenManager:
    """Get session token manager instance.

    Returns:
        SessionTokenManager.
    """
    return SessionTokenManager(get_settings().jwt)


def get_reset_token_manager() -> ResetTokenManager:
    """Get reset token manager instance.

    Returns:
        ResetTokenManager.
    """
    return ResetTokenManager(get_settings().jwt)


def get_notifier() -> BaseNotifier:
    """Get the reset email notifier.

    Returns:
        EmailNotifier configured from SMTP settings.
    """
    return EmailNotifier(get_settings().smtp)


def get_cookie_transport() -> SessionCookieTransport:
    """Get the session cookie transport.

    Returns:
        SessionCookieTransport.
    """
    return SessionCookieTransport.from_settings(get_settings())


def get_auth_service(
    store: CredentialStore = Depends(get_credential_store),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    session_tokens: SessionTokenManager = Depends(get_session_token_manager),
    reset_tokens: ResetTokenManager = Depends(get_reset_token_manager),
    notifier: BaseNotifier = Depends(get_notifier),
) -> AuthService:
    """Get AuthService instance.

    Args:
        store: Credential store.
        password_hasher: Password hasher.
        session_tokens: Session token manager.
        reset_tokens: Reset token manager.
        notifier: Reset email notifier.

    Returns:
        AuthService.
    """
    return AuthService(
        store=store,
        password_hasher=password_hasher,
        session_tokens=session_tokens,
        reset_tokens=reset_tokens,
        notifier=notifier,
        settings=get_settings().auth,
    )
