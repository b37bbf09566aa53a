# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base class for outbound notifiers.

A notifier delivers a single message to a single address. Delivery is
attempted once; implementations raise DeliveryError on any failure and
never retry.
"""

import logging
from abc import ABC, abstractmethod

from src.domains.auth.exceptions import DeliveryError

__all__ = ["BaseNotifier", "DeliveryError"]


class BaseNotifier(ABC):
    """Abstract base class for notifiers."""

    def __init__(self) -> None:
        """Initialize the notifier."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        """Deliver a message.

        Args:
            to_address: Recipient email address.
            subject: Message subject.
            html_body: HTML message body.

        Raises:
            DeliveryError: If the message could not be delivered.
        """
        ...
