"""
École API — Application Package Initializer
============================================

What: Marks the `ecole_api` directory as a Python package.
Why:  Enables module imports like `from ecole_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    This backend is a thin gateway in front of two hosted providers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Security (Token Verifier, Roles)  │  ← Who is calling, may they?
    ├─────────────────────────────────────┤
    │      Services (Gateways, Audit)     │  ← Provider calls + reshaping
    ├─────────────────────────────────────┤
    │   Providers (Supabase, Drive)       │  ← Source of truth for all data
    └─────────────────────────────────────┘

    Nothing is persisted locally: every entity lives in the auth/database
    provider or in Drive. The only process state is the two client handles
    created during the application lifespan.
"""

__version__ = "1.0.0"
