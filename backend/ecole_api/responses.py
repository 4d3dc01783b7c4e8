"""
École API — Error Response Bodies
==================================

What:  The one JSON error shape every failure path returns:
       `{error, message, request_id, details?}`.
Who:   The exception handlers in main.py and middleware that answers before
       routing (UploadLimitMiddleware).
"""

from typing import Any, Dict, Optional

from starlette.responses import JSONResponse

from ecole_api.exceptions import EcoleApiError
from ecole_api.middleware.request_id import request_id_var


def error_body(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    body = {"error": code, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def error_response(exc: EcoleApiError) -> JSONResponse:
    """
    Render an application error.

    Only the `field` context key reaches the client, and only for 4xx;
    everything else in `exc.context` is for the logs.
    """
    details = None
    if exc.status_code < 500:
        details = {k: v for k, v in exc.context.items() if k == "field"} or None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.message, details),
    )
