# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credential store contract and its SQLAlchemy implementation.

The authentication flows only need four operations from persistence:
lookup by email, lookup by id, create, and replace the password hash.
Both writes are conditional so that check-then-write races resolve in
the store:

- create() relies on the unique email index and raises
  EmailAlreadyRegisteredError when a concurrent registration won.
- update_password_hash() is a compare-and-swap on the current hash and
  raises StalePasswordHashError when another reset got there first.

Example:
    >>> store = SQLCredentialStore(session)
    >>> user = await store.create("Ada", "ada@example.com", password_hash)
    >>> await store.update_password_hash(user.id, password_hash, new_hash)
"""

import logging
from abc import ABC, abstractmethod
from uuid import uuid4

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models.user import User
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class CredentialStoreError(Exception):
    """Base exception for credential store errors."""

    pass


class EmailAlreadyRegisteredError(CredentialStoreError):
    """Raised when the email uniqueness constraint rejects an insert."""

    pass


class StalePasswordHashError(CredentialStoreError):
    """Raised when the stored hash changed since it was read."""

    pass


class CredentialStore(ABC):
    """Persistence contract for user credentials."""

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None:
        """Return the user registered with email, if any."""
        ...

    @abstractmethod
    async def find_by_id(self, user_id: str) -> User | None:
        """Return the user with the given id, if any."""
        ...

    @abstractmethod
    async def create(self, name: str, email: str, password_hash: str) -> User:
        """Insert a new user.

        Raises:
            EmailAlreadyRegisteredError: If the email is already taken.
        """
        ...

    @abstractmethod
    async def update_password_hash(
        self,
        user_id: str,
        expected_hash: str,
        new_hash: str,
    ) -> None:
        """Replace the password hash if it still equals expected_hash.

        Raises:
            StalePasswordHashError: If the stored hash differs.
        """
        ...


class SQLCredentialStore(CredentialStore):
    """CredentialStore backed by the users table.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the store.

        Args:
            db: Async database session.
        """
        self._db = db

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> User | None:
        return await self._db.get(User, user_id)

    async def create(self, name: str, email: str, password_hash: str) -> User:
        user = User(
            id=str(uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
        )
        self._db.add(user)

        try:
            await self._db.flush()
        except IntegrityError as e:
            await self._db.rollback()
            logger.info("Duplicate registration rejected by store for %s", email)
            raise EmailAlreadyRegisteredError(f"Email {email} is already registered") from e

        return user

    async def update_password_hash(
        self,
        user_id: str,
        expected_hash: str,
        new_hash: str,
    ) -> None:
        stmt = (
            update(User)
            .where(User.id == user_id, User.password_hash == expected_hash)
            .values(password_hash=new_hash, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self._db.execute(stmt)

        if result.rowcount == 0:
            raise StalePasswordHashError(f"Password hash for user {user_id} has changed")
