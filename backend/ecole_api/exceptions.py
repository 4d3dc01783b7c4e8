"""
École API — Custom Exception Hierarchy
=======================================

What:  Defines application-specific exceptions for each failure the gateway reports.
Why:   Services raise domain errors; global handlers in main.py map them to
       HTTP status codes and one consistent JSON body. Route handlers never
       build error responses themselves.
How:   Each exception class carries a user-facing message and an optional
       context dict (logged server-side, never returned for 5xx errors).

Exception Hierarchy:
    EcoleApiError (base)
    ├── UnauthorizedError        → 401 (no credential, or provider rejected the login)
    ├── ForbiddenError           → 403 (invalid/expired token, role not allowed)
    ├── ValidationError          → 400 (missing or malformed field)
    ├── NotFoundError            → 404 (scoped query matched nothing, missing file)
    ├── PayloadTooLargeError     → 413 (upload above the size cap)
    ├── ServiceUnavailableError  → 503 (dependent client not initialized)
    └── ProviderError            → 500 (any other provider failure)
"""

from typing import Any, Dict, Optional


class EcoleApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"
    default_message = "Erreur serveur"

    def __init__(self, message: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.context = dict(context) if context else {}
        super().__init__(self.message)


class UnauthorizedError(EcoleApiError):
    """
    Raised when no usable credential accompanies the request.

    When:    Missing `Authorization: Bearer` header, or the auth provider
             refused an email/password pair at login.
    HTTP:    401 Unauthorized
    """

    status_code = 401
    error_code = "unauthorized"
    default_message = "Accès non autorisé"


class ForbiddenError(EcoleApiError):
    """
    Raised when a credential is present but cannot be honoured.

    When:    Bad signature, expired token, or a role outside the route's allowed set.
    HTTP:    403 Forbidden
    """

    status_code = 403
    error_code = "forbidden"
    default_message = "Accès refusé"


class ValidationError(EcoleApiError):
    """
    Raised when client input fails validation.

    When:    Missing required field, empty update body, no file bytes.
    HTTP:    400 Bad Request (FastAPI's own 422 is remapped to 400 as well)

    `field` is the only context key echoed back to the client.
    """

    status_code = 400
    error_code = "validation_error"
    default_message = "Champs manquants ou invalides"

    def __init__(self, message=None, field: Optional[str] = None, context=None):
        super().__init__(message, context)
        self.field = field
        if field:
            self.context["field"] = field


class NotFoundError(EcoleApiError):
    """
    Raised when a requested resource does not exist for this caller.

    When:    A scoped update/delete affected zero rows, a user id has no row,
             or Drive reports the file id as unknown.
    HTTP:    404 Not Found

    PostgREST answers an unmatched filter with an empty list, not an error.
    Services convert that empty list into NotFoundError so a write against
    somebody else's row never looks like a success.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource} introuvable"
            if resource_id:
                message = f"{resource} introuvable (id: {resource_id})"
        super().__init__(message, context)
        self.context["resource"] = resource
        if resource_id:
            self.context["resource_id"] = resource_id


class PayloadTooLargeError(EcoleApiError):
    """Raised when an uploaded file exceeds `settings.max_upload_size`."""

    status_code = 413
    error_code = "payload_too_large"

    def __init__(self, max_size: int, actual_size: Optional[int] = None):
        max_mb = max_size / (1024 * 1024)
        super().__init__(
            f"Fichier trop volumineux (maximum {max_mb:.0f} Mo)",
            {"max_size": max_size, "actual_size": actual_size},
        )


class ServiceUnavailableError(EcoleApiError):
    """
    Raised when a dependent external client was never initialized.

    When:    Drive credentials were missing or the startup token exchange
             failed; Supabase URL/key were not configured.
    HTTP:    503 Service Unavailable

    There is no runtime re-initialization: the condition persists until the
    process restarts with corrected configuration.
    """

    status_code = 503
    error_code = "service_unavailable"
    default_message = "Service externe non configuré"

    def __init__(self, message=None, service: Optional[str] = None, context=None):
        super().__init__(message, context)
        self.service = service
        if service:
            self.context["service"] = service


class ProviderError(EcoleApiError):
    """
    Raised when an external provider call fails for any other reason.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is generic. The provider's own
        message, code and hint are kept in `context` and logged server-side.
    """

