"""
Authentication schemas.

Request fields are optional at the schema level: presence and format are
checked by the account service so that missing fields produce a 400 with
the list of offending fields.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class RegisterRequest(BaseModel):
    """User registration request."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(BaseModel):
    """User login request."""

    email: Optional[str] = None
    password: Optional[str] = None


class RegisterResponse(BaseModel):
    """Registration acknowledgement. Never echoes the password or hash."""

    message: str = "User registered successfully."


class TokenResponse(BaseModel):
    """Authentication token response."""

    token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(BaseModel):
    """User profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    role: str
    created_at: datetime
