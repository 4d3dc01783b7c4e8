"""
École API — Request Logging Middleware
=======================================

What:  One access log line per HTTP request, plus a DEBUG dump of POST bodies.
Why:   Operators need method, path, status and duration for every call to
       the gateway; developers need to see what the frontend actually sent.
How:   Measures time around `call_next`, chooses the log level from the
       status code, and includes the request id from RequestIDMiddleware.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, IP, request ID, caller id
    ✅ DEBUG only: JSON body of POST requests with password fields redacted
    ❌ Never: Authorization header, multipart file contents, raw passwords
"""

import json
import logging
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ecole_api.middleware.request_id import request_id_var

logger = logging.getLogger("ecole_api.access")

# Body keys whose values never reach the logs
REDACTED_FIELDS = {"password", "new_password", "refresh_token", "access_token"}


def redact(payload: Any) -> Any:
    """Recursively replace sensitive values in a decoded JSON body."""
    if isinstance(payload, dict):
        return {
            key: "***" if key.lower() in REDACTED_FIELDS else redact(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact(item) for item in payload]
    return payload


# Health checks hit these every few seconds; logging them drowns real traffic
QUIET_PATHS = frozenset({"/health"})


def level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One line per request: `<rid> <method> <path> -> <status> (<ms>) user=<id>`.

    The caller's id is known only once the Token Verifier has run inside the
    route, so it is read from `request.state` after the response is built;
    anonymous and rejected calls log `user=-`.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        rid = request_id_var.get("")
        if request.method == "POST" and logger.isEnabledFor(logging.DEBUG):
            await self._log_post_body(request, rid)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        identity = getattr(request.state, "identity", None)
        user_id = identity.id if identity is not None else "-"
        peer = request.client.host if request.client else "-"

        logger.log(
            level_for(response.status_code),
            "[%s] %s %s -> %d (%.1fms) user=%s ip=%s",
            rid,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            user_id,
            peer,
            extra={"request_id": rid, "user_id": user_id, "duration_ms": elapsed_ms},
        )
        return response

    async def _log_post_body(self, request: Request, rid: str) -> None:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("multipart/form-data"):
            logger.debug("[%s] Body: file upload", rid)
            return

        # Starlette caches the body, so the route handler can still read it
        raw = await request.body()
        if not raw:
            return
        try:
            body = redact(json.loads(raw))
        except ValueError:
            logger.debug("[%s] Body: %d bytes (not JSON)", rid, len(raw))
            return
        logger.debug("[%s] Body: %s", rid, body)
