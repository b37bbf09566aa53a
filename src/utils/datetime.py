# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for ShopStack Auth.

All datetimes handled by the application are timezone-aware UTC values.
Token claims carry integer Unix timestamps; the helpers below convert
between the two representations.

Usage:
    from src.utils.datetime import utc_now, to_timestamp

    issued_at = utc_now()
    claims = {"iat": to_timestamp(issued_at)}
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def utc_from_timestamp(timestamp: float) -> datetime:
    """Create a timezone-aware UTC datetime from a Unix timestamp.

    Args:
        timestamp: Unix timestamp (seconds since epoch).

    Returns:
        Timezone-aware UTC datetime.
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware UTC.

    Naive datetimes are assumed to already be in UTC.

    Args:
        dt: Datetime to normalize.

    Returns:
        Timezone-aware UTC datetime.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_timestamp(dt: datetime) -> int:
    """Convert a datetime to an integer Unix timestamp.

    Args:
        dt: Datetime to convert (naive values are treated as UTC).

    Returns:
        Seconds since epoch, truncated.
    """
    return int(ensure_utc(dt).timestamp())
