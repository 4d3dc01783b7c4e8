"""
École API — Upload Size Limit Middleware
=========================================

What:  Rejects oversized uploads before the multipart body is parsed.
Why:   The File Gateway never sees more than `max_upload_size` bytes; a
       20MB+ body is refused on its Content-Length alone, without buffering
       it into memory first.
How:   Checks the Content-Length header of requests to the guarded paths and
       short-circuits with 413. Bodies sent without a length (chunked) are
       checked again by the upload route after reading.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ecole_api.config import settings
from ecole_api.exceptions import PayloadTooLargeError
from ecole_api.responses import error_response

logger = logging.getLogger(__name__)


class UploadLimitMiddleware(BaseHTTPMiddleware):

    GUARDED_PATHS = {"/api/upload"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "POST" or request.url.path not in self.GUARDED_PATHS:
            return await call_next(request)

        raw_length = request.headers.get("content-length")
        try:
            content_length = int(raw_length) if raw_length else None
        except ValueError:
            content_length = None

        # Multipart framing adds a few hundred bytes on top of the file itself
        if content_length is not None and content_length > settings.max_upload_size + 64 * 1024:
            logger.warning(
                "Upload rejected: Content-Length %d exceeds %d bytes",
                content_length,
                settings.max_upload_size,
            )
            return error_response(PayloadTooLargeError(settings.max_upload_size, content_length))

        return await call_next(request)
