"""Exception handlers for the API.

Domain errors map onto status codes:

- ``ValidationError`` 400 with field errors
- ``AuthorizationError`` 403
- ``ConflictError`` 409, listing the conflicting bookings for venue clashes
- ``TokenInvalidError`` 410
- ``PreconditionError`` 400
- ``ExternalServiceError`` 503
"""

import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

from assistant.exceptions import ExternalServiceError
from events.exceptions import (
    AuthorizationError,
    ConflictError,
    PreconditionError,
    StaleStateError,
    TokenInvalidError,
    VenueConflictError,
)

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    is_staff = getattr(request, "user", None) and request.user.is_staff
    json_payload = None
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            json_payload = obfuscate(orjson.loads(request.body))
        except orjson.JSONDecodeError:  # pragma: no cover
            json_payload = None
    logger.exception(
        "internal_server_error",
        method=request.method,
        path=request.path,
        query=obfuscate(request.GET.dict()),
        headers=obfuscate(dict(request.headers)),
        json_payload=json_payload,
        user=str(request.user) if getattr(request, "user", None) else None,
    )
    data = {"detail": "Internal Server Error."}
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = traceback.format_exc()
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.info("validation_error", path=request.path)
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": list(exc.messages)}  # type: ignore[union-attr]
    return Response(status=400, data={"errors": error_dict})


def handle_authorization_error(
    request: HttpRequest, exc: AuthorizationError | t.Type[AuthorizationError]
) -> Response:
    """Handle a missing role or a self-review attempt."""
    logger.info("authorization_denied", path=request.path, reason=str(exc))
    return Response(status=403, data={"detail": str(exc) or "You do not have permission to perform this action."})


def handle_conflict_error(request: HttpRequest, exc: ConflictError | t.Type[ConflictError]) -> Response:
    """Handle a lost race: stale status or a venue slot taken meanwhile."""
    logger.info("write_conflict", path=request.path, kind=type(exc).__name__)
    data: dict[str, t.Any] = {"detail": str(exc)}
    if isinstance(exc, VenueConflictError):
        data["conflicts"] = [
            {
                "kind": str(c.kind),
                "start": c.start.isoformat(),
                "end": c.end.isoformat(),
                "title": c.title,
                "event_id": str(c.event_id) if c.event_id else None,
                "blackout_id": str(c.blackout_id) if c.blackout_id else None,
            }
            for c in exc.conflicts
        ]
    elif isinstance(exc, StaleStateError):
        data["expected"] = list(exc.expected)
        data["actual"] = exc.actual
    return Response(status=409, data=data)


def handle_precondition_error(request: HttpRequest, exc: PreconditionError | t.Type[PreconditionError]) -> Response:
    """Handle an operation attempted in the wrong lifecycle phase."""
    return Response(status=400, data={"detail": str(exc)})


def handle_token_invalid_error(request: HttpRequest, exc: TokenInvalidError | t.Type[TokenInvalidError]) -> Response:
    """Handle an unknown or expired check-in code."""
    return Response(status=410, data={"detail": str(exc)})


def handle_external_service_error(
    request: HttpRequest, exc: ExternalServiceError | t.Type[ExternalServiceError]
) -> Response:
    """Handle a failure of the text-generation backend."""
    return Response(status=503, data={"detail": "The assistant is unavailable right now. Please try again later."})


SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication", "cookie"}


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    if not isinstance(data, dict):
        return data
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
