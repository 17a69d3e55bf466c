"""
Pydantic request/response schemas for the HTTP API.
"""

from user_accounts.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from user_accounts.schemas.common import ErrorResponse, HealthResponse

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "RegisterResponse",
    "TokenResponse",
    "UserResponse",
    "ErrorResponse",
    "HealthResponse",
]
