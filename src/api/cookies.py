# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session cookie transport.

The session token travels in a single cookie. HttpOnly and
SameSite=Strict are always set; the Secure flag depends on the
deployment environment.

Clearing the cookie only tells the client to drop it. The token value
itself stays valid until it expires.
"""

from fastapi import Request, Response

from src.core.config.settings import SessionCookieSettings, Settings

SAMESITE = "strict"
COOKIE_PATH = "/"


class SessionCookieTransport:
    """Attaches, reads and clears the session cookie.

    Attributes:
        _settings: Cookie settings.
        _secure: Whether the Secure flag is set.
    """

    def __init__(self, settings: SessionCookieSettings, secure: bool) -> None:
        self._settings = settings
        self._secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionCookieTransport":
        """Build the transport from application settings."""
        return cls(settings.session_cookie, secure=settings.secure_cookies)

    @property
    def name(self) -> str:
        return self._settings.name

    def attach(self, response: Response, token: str) -> None:
        """Set the session cookie on a response.

        Args:
            response: Outgoing response.
            token: Session token.
        """
        response.set_cookie(
            key=self._settings.name,
            value=token,
            max_age=self._settings.max_age,
            path=COOKIE_PATH,
            httponly=True,
            secure=self._secure,
            samesite=SAMESITE,
        )

    def clear(self, response: Response) -> None:
        """Instruct the client to discard the session cookie.

        Args:
            response: Outgoing response.
        """
        response.delete_cookie(
            key=self._settings.name,
            path=COOKIE_PATH,
            httponly=True,
            secure=self._secure,
            samesite=SAMESITE,
        )

    def read(self, request: Request) -> str | None:
        """Return the session token sent by the client, if any."""
        return request.cookies.get(self._settings.name)
