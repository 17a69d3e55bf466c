"""
Account service: registration and login orchestration.

The service is stateless. Its collaborators (credential store, password
hasher, token issuer, optional event store) are passed in, so tests can
substitute in-memory implementations.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from user_accounts.kernel.events.event_store import EventStore
from user_accounts.kernel.identity.credential_store import CredentialStore, NewUserRecord
from user_accounts.kernel.identity.errors import (
    HashingError,
    InvalidCredentials,
    InvalidToken,
    PersistenceError,
    RegistrationFailed,
    UserNotFound,
    ValidationError,
)
from user_accounts.kernel.identity.jwt import DEFAULT_TOKEN_TTL, TokenIssuer
from user_accounts.kernel.identity.password import PasswordHasher
from user_accounts.kernel.models.event_log import EventType
from user_accounts.kernel.models.user import User, UserRole
from user_accounts.logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_REGISTRATION_FIELDS = ("username", "email", "password")


class RegistrationInput(BaseModel):
    """Validated registration data."""

    username: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.STUDENT

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()


@dataclass(frozen=True)
class Registered:
    """Outcome of a successful registration."""

    user_id: uuid.UUID


@dataclass(frozen=True)
class LoggedIn:
    """Outcome of a successful login."""

    token: str
    expires_in: int
    user_id: uuid.UUID
    token_type: str = "bearer"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_registration(
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    role: Optional[Union[UserRole, str]] = None,
) -> RegistrationInput:
    """
    Validate raw registration fields.

    Returns:
        RegistrationInput ready to be hashed and stored

    Raises:
        ValidationError: Listing every missing or invalid field
    """
    values = {"username": username, "email": email, "password": password}
    missing = [name for name in REQUIRED_REGISTRATION_FIELDS if _is_blank(values[name])]
    if missing:
        raise ValidationError("Missing required fields", fields=missing)

    data = dict(values)
    if not _is_blank(role):
        data["role"] = role.strip().lower() if isinstance(role, str) else role

    try:
        return RegistrationInput(**data)
    except PydanticValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError("Invalid registration data", fields=fields) from exc


class AccountService:
    """
    Registers accounts and logs users in.

    Handles: validate -> hash -> store on registration, and
    lookup -> verify -> issue token on login.
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        *,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        uniform_login_errors: bool = False,
        event_store: Optional[EventStore] = None,
    ):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.token_ttl = token_ttl
        self.uniform_login_errors = uniform_login_errors
        self.event_store = event_store

    async def register(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[Union[UserRole, str]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Registered:
        """
        Register a new account.

        Raises:
            ValidationError: Before any hashing or storage happens
            RegistrationFailed: Hashing or storage failed; the cause is logged
        """
        data = validate_registration(username, email, password, role)

        try:
            password_hash = await asyncio.to_thread(self.hasher.hash, data.password)
            user = await self.store.create(
                NewUserRecord(
                    username=data.username,
                    email=data.email,
                    password_hash=password_hash,
                    role=data.role,
                )
            )
        except (HashingError, PersistenceError) as exc:
            logger.error(
                "Registration failed for %s: %s",
                data.email,
                type(exc).__name__,
                exc_info=True,
            )
            raise RegistrationFailed() from exc

        user_id, role = user.id, user.role_value
        logger.info("Registered user %s (%s)", data.username, user_id)
        await self._record(
            EventType.USER_REGISTERED,
            user_id=user_id,
            payload={"role": role},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return Registered(user_id=user_id)

    async def login(
        self,
        email: Optional[str],
        password: Optional[str],
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> LoggedIn:
        """
        Check credentials and issue a token.

        Raises:
            ValidationError: email or password missing
            UserNotFound: No account for the email (``InvalidCredentials``
                instead when uniform login errors are enabled)
            InvalidCredentials: Password does not match
        """
        missing = [
            name for name, value in (("email", email), ("password", password)) if _is_blank(value)
        ]
        if missing:
            raise ValidationError("Missing required fields", fields=missing)

        user = await self.store.find_by_email(email)
        if user is None:
            await self._record(
                EventType.USER_LOGIN_FAILED,
                payload={"reason": "unknown_email"},
                ip_address=ip_address,
                user_agent=user_agent,
            )
            if self.uniform_login_errors:
                # same bcrypt cost as a real password check
                await asyncio.to_thread(self.hasher.verify_dummy, password)
                raise InvalidCredentials()
            raise UserNotFound()

        user_id, username = user.id, user.username
        matched = await asyncio.to_thread(self.hasher.verify, password, user.password_hash)
        if not matched:
            await self._record(
                EventType.USER_LOGIN_FAILED,
                user_id=user_id,
                payload={"reason": "bad_password"},
                ip_address=ip_address,
                user_agent=user_agent,
            )
            raise InvalidCredentials()

        token = self.issuer.issue(user_id, ttl=self.token_ttl)
        logger.info("Login: %s (%s)", username, user_id)
        await self._record(
            EventType.USER_LOGGED_IN,
            user_id=user_id,
            payload={"method": "password"},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return LoggedIn(
            token=token,
            expires_in=int(self.token_ttl.total_seconds()),
            user_id=user_id,
        )

    async def authenticate(self, token: str) -> User:
        """
        Resolve a bearer token to its account.

        Raises:
            InvalidToken: Token rejected by the issuer, or its subject is gone
        """
        claims = self.issuer.verify(token)
        try:
            user_id = uuid.UUID(claims.subject_id)
        except ValueError as exc:
            raise InvalidToken() from exc

        user = await self.store.find_by_id(user_id)
        if user is None:
            raise InvalidToken()
        return user

    async def _record(self, event_type: EventType, **kwargs) -> None:
        if self.event_store is None:
            return
        try:
            await self.event_store.log(event_type=event_type, **kwargs)
        except PersistenceError:
            # audit failures never change the outcome of the account operation
            logger.warning("Could not record %s event", event_type.value, exc_info=True)
