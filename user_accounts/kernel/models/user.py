"""
User model for identity management.
"""

import uuid
from enum import Enum

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from user_accounts.kernel.models.base import Base, TimestampMixin, generate_uuid


class UserRole(str, Enum):
    """User roles in the system."""
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class User(Base, TimestampMixin):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    username: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        String(50),
        default=UserRole.STUDENT,
        nullable=False,
    )

    @property
    def role_value(self) -> str:
        # role may come back as a plain str from SQLite
        return self.role.value if hasattr(self.role, "value") else self.role

    def __repr__(self) -> str:
        return f"<User {self.email}>"
