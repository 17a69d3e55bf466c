"""
FastAPI dependencies for database sessions, the account service and
authentication.
"""

from datetime import timedelta
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from user_accounts.config import Settings, get_settings
from user_accounts.database import get_db
from user_accounts.kernel.events.event_store import EventStore
from user_accounts.kernel.identity.account_service import AccountService
from user_accounts.kernel.identity.credential_store import SqlAlchemyCredentialStore
from user_accounts.kernel.identity.errors import InvalidToken
from user_accounts.kernel.identity.jwt import TokenIssuer
from user_accounts.kernel.identity.password import PasswordHasher
from user_accounts.kernel.models.user import User


# Security scheme
security = HTTPBearer(auto_error=False)

# Width of AccountEvent.ip_address
MAX_IP_LENGTH = 45


DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_token_issuer(settings: AppSettings) -> TokenIssuer:
    """Token issuer bound to the configured secret."""
    return TokenIssuer(settings.jwt_secret, algorithm=settings.jwt_algorithm)


def get_account_service(
    db: DbSession,
    settings: AppSettings,
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AccountService:
    """Wire an AccountService onto the request's session."""
    return AccountService(
        store=SqlAlchemyCredentialStore(db),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        issuer=issuer,
        token_ttl=timedelta(minutes=settings.access_token_expire_minutes),
        uniform_login_errors=settings.uniform_login_errors,
        event_store=EventStore(db),
    )


Accounts = Annotated[AccountService, Depends(get_account_service)]


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    accounts: Accounts,
) -> User:
    """Get current authenticated user or raise 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await accounts.authenticate(credentials.credentials)
    except InvalidToken as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_client_ip(request: Request, settings: AppSettings) -> Optional[str]:
    """
    Client address for the audit log.

    X-Forwarded-For is honoured only when the service runs behind a trusted
    proxy; the value is capped at the width of the ip_address column.
    """
    ip = request.client.host if request.client else None
    if settings.trust_proxy_headers:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            ip = forwarded.split(",")[0].strip()
    return ip[:MAX_IP_LENGTH] if ip else None


ClientIp = Annotated[Optional[str], Depends(get_client_ip)]


def get_user_agent(request: Request) -> Optional[str]:
    """Extract user agent from request."""
    return request.headers.get("User-Agent")


UserAgent = Annotated[Optional[str], Depends(get_user_agent)]
