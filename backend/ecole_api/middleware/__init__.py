# Middleware package init
"""
École API — Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Upload Limit] → [Logging] → [CORS] → Route Handler

    1. Request ID FIRST: correlation id for logs and error bodies, 413s included
    2. Upload Limit: refuse oversized bodies before anything reads them
    3. Logging: access line with status and duration
    4. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
