"""
JWT token issuance and verification for authentication.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import JWTError, jwt
from pydantic import BaseModel

from user_accounts.kernel.identity.errors import ConfigurationError, InvalidToken

# Lifetime of tokens issued on login
DEFAULT_TOKEN_TTL = timedelta(hours=1)


class TokenClaims(BaseModel):
    """Decoded access token."""

    subject_id: str
    issued_at: datetime
    expires_at: datetime
    token_id: str


class TokenIssuer:
    """
    Signs and verifies bearer tokens with a shared secret.

    Tokens are stateless: nothing is stored server-side, so possession of an
    unexpired, correctly signed token is the only proof checked.
    """

    def __init__(self, secret_key: Optional[str], algorithm: str = "HS256"):
        if not secret_key or not secret_key.strip():
            raise ConfigurationError("Token signing secret is not configured")
        self.secret_key = secret_key
        self.algorithm = algorithm

    def issue(
        self,
        subject_id: Union[uuid.UUID, str],
        ttl: timedelta = DEFAULT_TOKEN_TTL,
    ) -> str:
        """
        Create a signed token for ``subject_id`` expiring ``ttl`` from now.

        ``iat`` and ``exp`` are whole seconds so that ``exp - iat`` equals
        the TTL exactly.
        """
        issued_at = int(datetime.now(timezone.utc).timestamp())
        payload = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + int(ttl.total_seconds()),
            "jti": str(uuid.uuid4()),
            "type": "access",
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify and decode a token.

        Raises:
            InvalidToken: Bad signature, malformed, expired, or wrong type
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidToken() from exc

        if payload.get("type") != "access" or not payload.get("sub"):
            raise InvalidToken()

        try:
            return TokenClaims(
                subject_id=payload["sub"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                token_id=payload.get("jti", ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken() from exc
