# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Outbound notifications.

The only channel is email over SMTP, used to deliver password reset
links.

Configuration (environment variables):
- SMTP_HOST: SMTP server hostname
- SMTP_PORT: SMTP server port (default: 587)
- SMTP_USERNAME: SMTP authentication username
- SMTP_PASSWORD: SMTP authentication password
- SMTP_FROM_EMAIL: Sender email address (default: SMTP_USERNAME)
- SMTP_FROM_NAME: Sender display name (default: Shop Stack)
"""

from src.infrastructure.notifications.base import BaseNotifier, DeliveryError
from src.infrastructure.notifications.email import EmailNotifier

__all__ = [
    "BaseNotifier",
    "DeliveryError",
    "EmailNotifier",
]
