"""
École API — Provider Client Management
=======================================

What:  Lifecycle of the single async Supabase client and its FastAPI dependency.
Why:   Centralizes the connection to the auth/database provider in one place;
       route handlers receive the client through `Depends(get_supabase)` and
       tests swap it with `app.dependency_overrides`.
How:   `init_supabase()` runs once in the application lifespan. The handle
       is read-only afterwards and shared by all concurrent requests (the
       client is stateless per call; PostgREST/GoTrue do the write ordering).

Failure Policy:
    Missing URL/key or an invalid client configuration leaves the handle
    unset. The server keeps running; data routes answer 503 until restart.
"""

import logging
from typing import Optional

from supabase import AsyncClient, acreate_client

from ecole_api.config import settings
from ecole_api.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

_client: Optional[AsyncClient] = None


async def init_supabase() -> Optional[AsyncClient]:
    """
    Create the shared client from settings.

    Returns the client, or None when the provider is not configured.
    """
    global _client

    if not settings.supabase_configured:
        logger.error("Supabase not configured (SUPABASE_URL / SUPABASE_KEY missing)")
        return None

    # acreate_client validates URL and key format and raises on garbage
    _client = await acreate_client(settings.supabase_url, settings.supabase_key)
    logger.info("Supabase client ready for %s", settings.supabase_url)
    return _client


def set_supabase(client: Optional[AsyncClient]) -> None:
    """Install (or clear) the shared client; used by the lifespan and by tests."""
    global _client
    _client = client


async def get_supabase() -> AsyncClient:
    """
    FastAPI dependency returning the shared provider client.

    Raises:
        ServiceUnavailableError when the client was never initialized.
    """
    if _client is None:
        raise ServiceUnavailableError(
            message="Base de données non configurée",
            service="supabase",
        )
    return _client


async def dispose_supabase() -> None:
    """
    What:  Drops the shared client handle on shutdown.
    Why:   The underlying httpx pools are closed when the client is collected;
           clearing the handle makes late requests fail fast with 503.
    """
    set_supabase(None)
    logger.info("Supabase client released")
