# Schemas package init
"""
École API — Pydantic Request/Response Schemas
==============================================

What:  The API contract between the frontend and this gateway.
Why:   Request bodies are validated before any provider call; responses are
       filtered to the declared fields so provider-internal columns never leak.
"""
