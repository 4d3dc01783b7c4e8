"""
École API — Provider Call Helpers
==================================

What:  The two primitives every gateway uses to talk to Supabase.
Why:   Each CRUD call has the same tail: await the query, turn a
       provider-reported error into ProviderError (500) with details logged,
       and hand back plain rows. Writing it once keeps the gateways short.
"""

import logging
from typing import Any, Dict, List

from supabase import AuthError, PostgrestAPIError

from ecole_api.exceptions import ProviderError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


async def execute(query: Any, action: str) -> List[Row]:
    """
    Run a PostgREST query builder and return its rows.

    Args:
        query:  A built query (`client.table(...).select(...).eq(...)`)
        action: Short label for logs, e.g. "cours.update"

    Raises:
        ProviderError when PostgREST reports an error.
    """
    try:
        response = await query.execute()
    except PostgrestAPIError as e:
        logger.error(
            "Provider error during %s: %s (code=%s, hint=%s)",
            action,
            e.message,
            e.code,
            e.hint,
        )
        raise ProviderError(
            context={"action": action, "provider_message": e.message, "code": e.code},
        )
    return list(response.data or [])


def auth_failure(action: str, error: AuthError) -> ProviderError:
    """Log an auth-admin failure and build the matching ProviderError."""
    logger.error("Auth provider error during %s: %s", action, error.message)
    return ProviderError(
        context={"action": action, "provider_message": error.message},
    )


def to_plain(obj: Any) -> Row:
    """Convert provider SDK objects (pydantic models) to JSON-ready dicts."""
    if obj is None:
        return {}
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    return dict(obj)
