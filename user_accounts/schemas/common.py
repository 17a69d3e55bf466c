"""
Common schema types used across the API.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    fields: Optional[List[str]] = None
    request_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    service: str
    version: str
    timestamp: datetime
    port: int
    database: str = "connected"
