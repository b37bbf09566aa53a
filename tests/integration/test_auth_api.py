# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the authentication endpoints.

Runs the HTTP surface through TestClient with the credential store and
notifier replaced by in-memory fakes. No database or SMTP server needed.
"""

import re
from urllib.parse import urlsplit

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import get_credential_store
from src.core.config.settings import clear_settings_cache
from tests.fakes import InMemoryCredentialStore, RecordingNotifier

REGISTER_URL = "/api/auth/register"
LOGIN_URL = "/api/auth/login"
LOGOUT_URL = "/api/auth/logout"
FORGOT_URL = "/api/auth/forgot-password"


def _register(client: TestClient, email: str = "a@x.com", password: str = "pw1"):
    return client.post(REGISTER_URL, json={"name": "A", "email": email, "password": password})


def _reset_path(notifier: RecordingNotifier) -> str:
    """Return the path of the most recently emailed reset link."""
    _, _, html_body = notifier.messages[-1]
    match = re.search(r'href="([^"]+)"', html_body)
    assert match is not None
    return urlsplit(match.group(1)).path


def _assert_session_cookie(set_cookie: str) -> None:
    header = set_cookie.lower()
    assert header.startswith("token=")
    assert "httponly" in header
    assert "samesite=strict" in header
    assert "max-age=604800" in header


class TestRegisterEndpoint:
    """Tests for POST /api/auth/register."""

    def test_register_then_duplicate(self, client: TestClient) -> None:
        """Test that the second registration of an email conflicts."""
        first = _register(client, password="pw1")
        second = _register(client, password="pw2")

        assert first.status_code == 201
        assert first.json() == {"success": True, "message": "User registered successfully"}
        _assert_session_cookie(first.headers["set-cookie"])

        assert second.status_code == 409
        assert second.json() == {"success": False, "message": "User already exists"}

    def test_register_missing_fields(self, client: TestClient) -> None:
        response = client.post(REGISTER_URL, json={"email": "a@x.com"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "All fields are required"}
        assert "set-cookie" not in response.headers

    def test_register_invalid_body(self, client: TestClient) -> None:
        """Test that an unparseable body is a 400, not a 422."""
        response = client.post(
            REGISTER_URL,
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_register_password_over_byte_limit(self, client: TestClient) -> None:
        """Test that a password bcrypt cannot hash is a 400, not a 500."""
        response = _register(client, password="x" * 80)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Password must be at most 72 bytes",
        }
        assert "set-cookie" not in response.headers

    def test_register_malformed_email(self, client: TestClient) -> None:
        response = _register(client, email="notanemail")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid email address"}

    def test_register_trims_email(
        self,
        client: TestClient,
        store: InMemoryCredentialStore,
    ) -> None:
        response = _register(client, email="  A@X.com ")

        assert response.status_code == 201
        assert next(iter(store.users.values())).email == "a@x.com"


class TestLoginEndpoint:
    """Tests for POST /api/auth/login."""

    def test_login_wrong_password_then_right(self, client: TestClient) -> None:
        _register(client)

        wrong = client.post(LOGIN_URL, json={"email": "a@x.com", "password": "bad"})
        right = client.post(LOGIN_URL, json={"email": "a@x.com", "password": "pw1"})

        assert wrong.status_code == 401
        assert wrong.json() == {"success": False, "message": "Invalid credentials"}
        assert right.status_code == 200
        assert right.json() == {"success": True, "message": "Login successful"}
        _assert_session_cookie(right.headers["set-cookie"])

    def test_unknown_email_same_as_wrong_password(self, client: TestClient) -> None:
        _register(client)

        unknown = client.post(LOGIN_URL, json={"email": "b@x.com", "password": "pw1"})
        wrong = client.post(LOGIN_URL, json={"email": "a@x.com", "password": "bad"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()

    def test_login_missing_fields(self, client: TestClient) -> None:
        response = client.post(LOGIN_URL, json={"email": "a@x.com"})

        assert response.status_code == 400
        assert response.json()["message"] == "Email and password required"

    def test_login_password_over_byte_limit(self, client: TestClient) -> None:
        """Test that an overlong password is answered like a wrong one."""
        _register(client)

        response = client.post(LOGIN_URL, json={"email": "a@x.com", "password": "x" * 80})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}


class TestLogoutEndpoint:
    """Tests for POST /api/auth/logout."""

    def test_logout_clears_cookie(self, client: TestClient) -> None:
        _register(client)
        assert client.cookies.get("token")

        response = client.post(LOGOUT_URL)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}
        header = response.headers["set-cookie"].lower()
        assert header.startswith("token=")
        assert "max-age=0" in header
        assert not client.cookies.get("token")

    def test_logout_without_session(self, client: TestClient) -> None:
        response = client.post(LOGOUT_URL)

        assert response.status_code == 200


class TestPasswordResetFlow:
    """Tests for forgot-password and reset-password endpoints."""

    def test_forgot_password_sends_link(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
        store: InMemoryCredentialStore,
    ) -> None:
        _register(client)
        user = next(iter(store.users.values()))

        response = client.post(FORGOT_URL, json={"email": "a@x.com"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Password reset link sent to email",
        }
        to_address, subject, html_body = notifier.messages[-1]
        assert to_address == "a@x.com"
        assert subject == "Reset Your Password"
        assert f"http://testserver/api/auth/reset-password/{user.id}/" in html_body

    def test_forgot_password_unknown_email(self, client: TestClient) -> None:
        response = client.post(FORGOT_URL, json={"email": "nobody@x.com"})

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}

    def test_forgot_password_delivery_failure(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
    ) -> None:
        _register(client)
        notifier.fail = True

        response = client.post(FORGOT_URL, json={"email": "a@x.com"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to send email"}

    def test_forgot_password_uses_public_base_url(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _register(client)
        monkeypatch.setenv("AUTH_PUBLIC_BASE_URL", "https://shop.example.com/")
        clear_settings_cache()

        client.post(FORGOT_URL, json={"email": "a@x.com"})

        _, _, html_body = notifier.messages[-1]
        assert 'href="https://shop.example.com/api/auth/reset-password/' in html_body

    def test_full_reset_flow(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
        store: InMemoryCredentialStore,
    ) -> None:
        """Test forgot, check, reset, replay and login with the new password."""
        _register(client)
        user = next(iter(store.users.values()))
        client.post(FORGOT_URL, json={"email": "a@x.com"})
        path = _reset_path(notifier)
        token = path.rsplit("/", 1)[-1]

        context = client.get(path)
        assert context.status_code == 200
        assert context.json() == {"id": user.id, "email": "a@x.com", "token": token}

        reset = client.post(path, json={"password": "pw2", "confirm": "pw2"})
        assert reset.status_code == 200
        assert reset.headers["content-type"].startswith("text/plain")
        assert reset.text == "Password reset successful. You can now login."

        replay = client.post(path, json={"password": "pw3", "confirm": "pw3"})
        assert replay.status_code == 400
        assert replay.text == "Reset link expired or invalid"

        stale = client.get(path)
        assert stale.status_code == 400
        assert stale.text == "Reset link is invalid or expired"

        old = client.post(LOGIN_URL, json={"email": "a@x.com", "password": "pw1"})
        new = client.post(LOGIN_URL, json={"email": "a@x.com", "password": "pw2"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_reset_passwords_do_not_match(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
    ) -> None:
        _register(client)
        client.post(FORGOT_URL, json={"email": "a@x.com"})
        path = _reset_path(notifier)

        response = client.post(path, json={"password": "pw2", "confirm": "pw3"})

        assert response.status_code == 400
        assert response.text == "Passwords do not match"

    def test_reset_unknown_user(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/reset-password/missing/some.token.value",
            json={"password": "pw2", "confirm": "pw2"},
        )

        assert response.status_code == 404
        assert response.text == "User not found"

    def test_reset_link_with_garbage_token(
        self,
        client: TestClient,
        store: InMemoryCredentialStore,
    ) -> None:
        _register(client)
        user = next(iter(store.users.values()))

        response = client.get(f"/api/auth/reset-password/{user.id}/garbage")

        assert response.status_code == 400
        assert response.text == "Reset link is invalid or expired"

    def test_browser_reset_form_flow(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
    ) -> None:
        """Test opening the emailed link in a browser and submitting the form."""
        _register(client)
        client.post(FORGOT_URL, json={"email": "a@x.com"})
        path = _reset_path(notifier)

        page = client.get(path, headers={"Accept": "text/html,application/xhtml+xml"})
        assert page.status_code == 200
        assert page.headers["content-type"].startswith("text/html")
        assert f'action="{path}"' in page.text
        assert 'name="password"' in page.text
        assert 'name="confirm"' in page.text
        assert "a@x.com" in page.text

        reset = client.post(path, data={"password": "pw2", "confirm": "pw2"})
        assert reset.status_code == 200
        assert reset.text == "Password reset successful. You can now login."

        login = client.post(LOGIN_URL, json={"email": "a@x.com", "password": "pw2"})
        assert login.status_code == 200

    def test_reset_form_passwords_do_not_match(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
    ) -> None:
        _register(client)
        client.post(FORGOT_URL, json={"email": "a@x.com"})
        path = _reset_path(notifier)

        response = client.post(path, data={"password": "pw2", "confirm": "pw3"})

        assert response.status_code == 400
        assert response.text == "Passwords do not match"

    def test_reset_password_over_byte_limit(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
    ) -> None:
        _register(client)
        client.post(FORGOT_URL, json={"email": "a@x.com"})
        path = _reset_path(notifier)
        password = "x" * 80

        response = client.post(path, data={"password": password, "confirm": password})

        assert response.status_code == 400
        assert response.text == "Password must be at most 72 bytes"

    def test_reset_unparseable_body_is_plain_text(
        self,
        client: TestClient,
        notifier: RecordingNotifier,
    ) -> None:
        """Test that a broken body gets the same plain text treatment."""
        _register(client)
        client.post(FORGOT_URL, json={"email": "a@x.com"})
        path = _reset_path(notifier)

        response = client.post(
            path,
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Invalid request body"


class TestUnexpectedErrors:
    """Tests for errors that escape the route handlers."""

    def test_unexpected_error_is_500(self, app: FastAPI) -> None:
        class BrokenStore(InMemoryCredentialStore):
            async def find_by_email(self, email: str):
                raise RuntimeError("database is on fire")

        app.dependency_overrides[get_credential_store] = lambda: BrokenStore()
        client = TestClient(app)

        response = client.post(LOGIN_URL, json={"email": "a@x.com", "password": "pw1"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
        assert response.headers["x-request-id"]


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_without_database(self, client: TestClient) -> None:
        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["ready"] is False
