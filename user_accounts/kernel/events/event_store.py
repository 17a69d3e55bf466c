"""
Event Store service for append-only account audit logging.
"""

import uuid
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from user_accounts.kernel.identity.errors import PersistenceError
from user_accounts.kernel.models.event_log import AccountEvent, EventType

class EventStore:
    """
    Service for managing the account event log.

    Each event is committed as soon as it is logged, so failed logins are
    recorded even though the request that produced them fails.

    Usage:
        event_store = EventStore(session)
        await event_store.log(
            event_type=EventType.USER_REGISTERED,
            user_id=user.id,
            payload={"role": "student"},
        )
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log(
        self,
        event_type: EventType,
        user_id: Optional[uuid.UUID] = None,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AccountEvent:
        """
        Append an event to the log.

        Args:
            event_type: The type of event
            user_id: The account the event concerns, when known
            payload: Additional event data (JSON-serializable)
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            The created AccountEvent record

        Raises:
            PersistenceError: If the event could not be written
        """
        event = AccountEvent(
            event_type=event_type,
            user_id=user_id,
            payload=payload or {},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        try:
            # a failed insert rolls back to the savepoint only; objects the
            # caller already committed on this session stay loaded
            async with self.session.begin_nested():
                self.session.add(event)
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return event
