# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for ShopStack Auth.

Example:
    >>> from src.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.api.port)
    5000
"""

from src.core.config.settings import (
    APISettings,
    AuthSettings,
    DatabaseSettings,
    JWTSettings,
    SessionCookieSettings,
    Settings,
    SMTPSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DatabaseSettings",
    "JWTSettings",
    "AuthSettings",
    "SessionCookieSettings",
    "SMTPSettings",
    "APISettings",
]
