"""
Account event log services.
"""

from user_accounts.kernel.events.event_store import EventStore

__all__ = ["EventStore"]
