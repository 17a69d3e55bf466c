"""
Identity Core - Authentication and user management.
"""

from user_accounts.kernel.identity.errors import (
    AccountError,
    ConfigurationError,
    HashingError,
    InvalidCredentials,
    InvalidToken,
    PersistenceError,
    RegistrationFailed,
    UserNotFound,
    ValidationError,
)
from user_accounts.kernel.identity.password import PasswordHasher
from user_accounts.kernel.identity.jwt import DEFAULT_TOKEN_TTL, TokenClaims, TokenIssuer
from user_accounts.kernel.identity.credential_store import (
    CredentialStore,
    InMemoryCredentialStore,
    NewUserRecord,
    SqlAlchemyCredentialStore,
)
from user_accounts.kernel.identity.account_service import (
    AccountService,
    LoggedIn,
    Registered,
    RegistrationInput,
    validate_registration,
)

__all__ = [
    # Errors
    "AccountError",
    "ConfigurationError",
    "HashingError",
    "InvalidCredentials",
    "InvalidToken",
    "PersistenceError",
    "RegistrationFailed",
    "UserNotFound",
    "ValidationError",
    # Password
    "PasswordHasher",
    # Tokens
    "DEFAULT_TOKEN_TTL",
    "TokenClaims",
    "TokenIssuer",
    # Store
    "CredentialStore",
    "InMemoryCredentialStore",
    "NewUserRecord",
    "SqlAlchemyCredentialStore",
    # Service
    "AccountService",
    "LoggedIn",
    "Registered",
    "RegistrationInput",
    "validate_registration",
]
