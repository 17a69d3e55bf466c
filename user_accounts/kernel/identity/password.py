"""
Password hashing utilities using bcrypt.
"""

import secrets
from typing import Dict

import bcrypt

from user_accounts.kernel.identity.errors import HashingError

# Work factor for new hashes
BCRYPT_ROUNDS = 10

# Throwaway hashes keyed by work factor
_DUMMY_HASHES: Dict[int, str] = {}


class PasswordHasher:
    """Password hashing service."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """
        Truncate password to 72 bytes (bcrypt limit) and encode.

        bcrypt only uses the first 72 bytes of a password.
        """
        if not isinstance(password, str):
            raise HashingError("Password must be a string")
        try:
            return password.encode("utf-8")[:72]
        except UnicodeEncodeError as exc:
            raise HashingError("Password is not valid UTF-8") from exc

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string

        Raises:
            HashingError: If the password cannot be encoded or hashed
        """
        pwd_bytes = self._truncate_password(password)
        try:
            hashed = bcrypt.hashpw(pwd_bytes, bcrypt.gensalt(rounds=self.rounds))
        except ValueError as exc:
            raise HashingError(str(exc)) from exc
        return hashed.decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        A mismatch is a normal ``False``. Only a malformed hash raises.

        Raises:
            HashingError: If ``hashed_password`` is not a bcrypt hash
        """
        pwd_bytes = self._truncate_password(plain_password)
        if not isinstance(hashed_password, str) or not hashed_password:
            raise HashingError("Stored password hash is malformed")
        try:
            return bcrypt.checkpw(pwd_bytes, hashed_password.encode("utf-8"))
        except ValueError as exc:
            raise HashingError("Stored password hash is malformed") from exc

    def verify_dummy(self, plain_password: str) -> bool:
        """
        Run a full bcrypt check against a throwaway hash and return False.

        Used when there is no stored hash to compare with, so the caller
        spends the same time as a real mismatch.
        """
        dummy = _DUMMY_HASHES.get(self.rounds)
        if dummy is None:
            dummy = _DUMMY_HASHES.setdefault(self.rounds, self.hash(secrets.token_urlsafe(16)))
        self.verify(plain_password, dummy)
        return False
