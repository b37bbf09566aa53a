# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- In-memory CredentialStore and recording notifier fakes
- Token managers and AuthService wired to the fakes
- A TestClient whose store and notifier are overridden
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from src.api.app import create_app
from src.api.dependencies import (
    get_credential_store,
    get_notifier,
    get_password_hasher,
)
from src.core.config.settings import AuthSettings, JWTSettings, clear_settings_cache
from src.domains.auth.password import PasswordHasher
from src.domains.auth.reset_tokens import ResetTokenManager
from src.domains.auth.service import AuthService
from src.domains.auth.session_tokens import SessionTokenManager
from tests.fakes import InMemoryCredentialStore, RecordingNotifier

# Minimum bcrypt cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Reload settings for every test so patched environments apply."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def jwt_settings() -> JWTSettings:
    """Create JWT settings with test secrets."""
    return JWTSettings(
        secret_key=SecretStr("test-secret-key-for-jwt-testing"),
        reset_secret_key=SecretStr("test-reset-secret"),
    )


@pytest.fixture
def auth_settings() -> AuthSettings:
    """Create auth flow settings with defaults."""
    return AuthSettings()


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Create a fast password hasher."""
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def session_tokens(jwt_settings: JWTSettings) -> SessionTokenManager:
    """Create session token manager with test settings."""
    return SessionTokenManager(jwt_settings)


@pytest.fixture
def reset_tokens(jwt_settings: JWTSettings) -> ResetTokenManager:
    """Create reset token manager with test settings."""
    return ResetTokenManager(jwt_settings)


@pytest.fixture
def store() -> InMemoryCredentialStore:
    """Create an empty in-memory credential store."""
    return InMemoryCredentialStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Create a recording notifier."""
    return RecordingNotifier()


@pytest.fixture
def auth_service(
    store: InMemoryCredentialStore,
    password_hasher: PasswordHasher,
    session_tokens: SessionTokenManager,
    reset_tokens: ResetTokenManager,
    notifier: RecordingNotifier,
    auth_settings: AuthSettings,
) -> AuthService:
    """Create AuthService wired to the fakes."""
    return AuthService(
        store=store,
        password_hasher=password_hasher,
        session_tokens=session_tokens,
        reset_tokens=reset_tokens,
        notifier=notifier,
        settings=auth_settings,
    )


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def app(store: InMemoryCredentialStore, notifier: RecordingNotifier) -> FastAPI:
    """Create the application with the store and notifier overridden.

    The lifespan is not run, so no database connection is opened.
    """
    application = create_app()
    application.dependency_overrides[get_credential_store] = lambda: store
    application.dependency_overrides[get_notifier] = lambda: notifier
    application.dependency_overrides[get_password_hasher] = lambda: PasswordHasher(
        rounds=TEST_BCRYPT_ROUNDS
    )
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for the application."""
    return TestClient(app)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
