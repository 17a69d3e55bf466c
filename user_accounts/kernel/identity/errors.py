"""
Exceptions raised by the identity core.

Routes translate these into HTTP responses; the messages here are the
public ones and never carry storage or hashing details.
"""

from typing import List, Optional


class AccountError(Exception):
    """Base class for all account errors."""

    message = "Account operation failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(AccountError):
    """Missing or malformed input. Raised before any collaborator is used."""

    message = "Missing required fields"

    def __init__(self, message: Optional[str] = None, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])


class HashingError(AccountError):
    message = "Password hashing failed."


class PersistenceError(AccountError):
    message = "Storage operation failed."


class UserNotFound(AccountError):
    message = "User not found."


class InvalidCredentials(AccountError):
    message = "Invalid credentials."


class InvalidToken(AccountError):
    message = "Invalid or expired token."


class ConfigurationError(AccountError):
    message = "Service is misconfigured."


class RegistrationFailed(AccountError):
    message = "Registration failed."
