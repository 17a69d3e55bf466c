"""
Append-only log of account events.

Rows are inserted and never updated or deleted. Payloads must not carry
passwords or password hashes.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, String, Text, func, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from user_accounts.kernel.models.base import Base, generate_uuid


class EventType(str, Enum):
    """Account event types."""

    USER_REGISTERED = "user.registered"
    USER_LOGGED_IN = "user.logged_in"
    USER_LOGIN_FAILED = "user.login_failed"


class AccountEvent(Base):
    """Immutable account audit event."""

    __tablename__ = "account_events"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    event_type: Mapped[EventType] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )
    # Null for failed logins against unknown emails
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,
        index=True,
    )
    payload: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),  # IPv6 max length
        nullable=True,
    )
    user_agent: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_account_events_user_time", "user_id", "created_at"),
    )

    @property
    def event_name(self) -> str:
        return self.event_type.value if hasattr(self.event_type, "value") else self.event_type

    def __repr__(self) -> str:
        return f"<AccountEvent {self.event_name} user={self.user_id}>"
