# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notifier using async SMTP.

This notifier sends email using aiosmtplib for async SMTP communication.
Messages are sent as multipart/alternative with an HTML part and a plain
text part derived from it.
"""

import html
import re
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid

import aiosmtplib

from src.core.config.settings import SMTPSettings
from src.infrastructure.notifications.base import BaseNotifier, DeliveryError

_TAG_RE = re.compile(r"<[^>]+>")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


class EmailNotifier(BaseNotifier):
    """Email notifier using async SMTP.

    Attributes:
        _settings: SMTP configuration.
    """

    def __init__(self, settings: SMTPSettings) -> None:
        """Initialize the email notifier.

        Args:
            settings: SMTP configuration.
        """
        super().__init__()
        self._settings = settings

    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        """Send an email via SMTP.

        Args:
            to_address: Recipient email address.
            subject: Message subject.
            html_body: HTML message body.

        Raises:
            DeliveryError: If SMTP is not configured or the send fails.
        """
        if not self._settings.is_configured:
            self.logger.warning(
                "Email delivery disabled: SMTP_HOST, SMTP_USERNAME or SMTP_PASSWORD not set"
            )
            raise DeliveryError()

        message = self.build_message(to_address, subject, html_body)
        password = self._settings.password.get_secret_value() if self._settings.password else None

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.host,
                port=self._settings.port,
                username=self._settings.username,
                password=password,
                start_tls=self._settings.use_tls,
                timeout=self._settings.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            self.logger.error(
                "Failed to send email to %s: %s",
                to_address,
                str(e),
                exc_info=True,
            )
            raise DeliveryError() from e

        self.logger.info("Email sent to %s: %s", to_address, subject)

    def build_message(self, to_address: str, subject: str, html_body: str) -> MIMEMultipart:
        """Build the MIME message.

        Args:
            to_address: Recipient email address.
            subject: Message subject.
            html_body: HTML message body.

        Returns:
            MIMEMultipart message ready to send.
        """
        message = MIMEMultipart("alternative")
        message["From"] = formataddr((self._settings.from_name, self._settings.sender or ""))
        message["To"] = to_address
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()

        message.attach(MIMEText(html_to_text(html_body), "plain", "utf-8"))
        message.attach(MIMEText(html_body, "html", "utf-8"))

        return message


def html_to_text(html_body: str) -> str:
    """Derive a plain text body from simple HTML.

    Anchors keep their visible text; since reset emails print the link as
    the anchor text, the URL survives.

    Args:
        html_body: HTML content.

    Returns:
        Plain text content.
    """
    text = _TAG_RE.sub("\n", html_body)
    text = html.unescape(text)
    lines = [line.strip() for line in text.splitlines()]
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()
