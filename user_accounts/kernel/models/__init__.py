"""
Kernel Data Models

SQLAlchemy models for user identity records and the account event log.
"""

from user_accounts.kernel.models.base import Base, TimestampMixin, generate_uuid
from user_accounts.kernel.models.user import User, UserRole
from user_accounts.kernel.models.event_log import AccountEvent, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    # User
    "User",
    "UserRole",
    # Event Log
    "AccountEvent",
    "EventType",
]
