"""
Credential stores: persistence of user identity records.

``SqlAlchemyCredentialStore`` is the production store. ``InMemoryCredentialStore``
honours the same contract without a database and is meant for tests and
tooling.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from user_accounts.kernel.identity.errors import PersistenceError
from user_accounts.kernel.models.user import User, UserRole
from user_accounts.logging_config import get_logger

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    """
    Lookup form of an email address.

    Unicode forms are unified the way email-validator normalizes them at
    registration, then the whole address is lowercased. Strings that are not
    valid addresses are only stripped and lowercased; they match nothing.
    """
    email = email.strip()
    try:
        normalized = validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError:
        normalized = email
    return normalized.lower()


@dataclass(frozen=True)
class NewUserRecord:
    """Input for ``CredentialStore.create``. Carries a hash, never a password."""

    username: str
    email: str
    password_hash: str
    role: UserRole = UserRole.STUDENT


class CredentialStore(Protocol):
    """
    Contract for persisting and looking up identity records.

    ``find_*`` return ``None`` when nothing matches; they never raise for
    the not-found case.
    """

    async def create(self, record: NewUserRecord) -> User: ...

    async def find_by_email(self, email: str) -> Optional[User]: ...

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]: ...


class SqlAlchemyCredentialStore:
    """Credential store backed by the ``users`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: NewUserRecord) -> User:
        """
        Persist a new user and commit.

        Raises:
            PersistenceError: On constraint violations (duplicate email) or
                any other storage failure
        """
        user = User(
            username=record.username,
            email=normalize_email(record.email),
            password_hash=record.password_hash,
            role=record.role,
        )
        self.session.add(user)
        try:
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            await self.session.rollback()
            raise PersistenceError("Constraint violated") from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError() from exc
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        query = select(User).where(User.email == normalize_email(email))
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get a user by ID."""
        try:
            result = await self.session.execute(select(User).where(User.id == user_id))
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return result.scalar_one_or_none()


@dataclass
class InMemoryCredentialStore:
    """
    Dict-backed store keyed by email and id.

    Enforces email uniqueness the way the ``users`` table does.
    """

    _by_email: Dict[str, User] = field(default_factory=dict)
    _by_id: Dict[uuid.UUID, User] = field(default_factory=dict)

    async def create(self, record: NewUserRecord) -> User:
        email = normalize_email(record.email)
        if email in self._by_email:
            raise PersistenceError("Constraint violated")
        now = datetime.now(timezone.utc)
        user = User(
            id=uuid.uuid4(),
            username=record.username,
            email=email,
            password_hash=record.password_hash,
            role=record.role,
            created_at=now,
            updated_at=now,
        )
        self._by_email[email] = user
        self._by_id[user.id] = user
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        return self._by_email.get(normalize_email(email))

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self._by_id.get(user_id)

    def __len__(self) -> int:
        return len(self._by_id)
