"""
École API — Shared Response Schemas
====================================

What:  Error body, status/health snapshots and the generic message body.
Why:   Every error response has the same shape regardless of which exception
       produced it; declaring it once keeps the OpenAPI docs honest.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

# Provider primary keys are UUID strings for users, integers or UUIDs elsewhere
RowId = Union[int, str]


class ErrorResponse(BaseModel):
    """Body of every non-2xx response produced by the global handlers."""

    error: str = Field(description="Machine-readable error code, e.g. 'not_found'")
    message: str = Field(description="Human-readable explanation")
    details: Optional[Dict[str, Any]] = Field(default=None)
    request_id: str = Field(default="", description="Correlation id (X-Request-ID)")


class MessageResponse(BaseModel):
    message: str


class StatusResponse(BaseModel):
    """Snapshot returned by `GET /`."""

    status: str = Field(default="running")
    message: str
    timestamp: datetime
    drive: str = Field(description="File gateway state: uninitialized, ready, disabled")


class HealthResponse(BaseModel):
    """
    Returned by `GET /health`.

    Status levels:
        healthy   → every dependency is usable
        degraded  → the server runs but a provider client is missing
    """

    status: str
    version: str
    supabase: str
    drive: str
    uptime_seconds: float
