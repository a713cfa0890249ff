from collections.abc import Mapping
from typing import Any, Dict, Optional

from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

DEFAULT_ERROR_STATUS = status.HTTP_400_BAD_REQUEST

ERROR_STATUS_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "DATABASE_ERROR": status.HTTP_409_CONFLICT,
    "TOO_MANY_REQUESTS": status.HTTP_429_TOO_MANY_REQUESTS,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _normalize_details(details: Any) -> Any:
    if isinstance(details, ValidationError):
        return as_serializer_error(details)
    if isinstance(details, Mapping):
        return dict(details)
    if isinstance(details, Exception):
        return {"type": details.__class__.__name__}
    return details


def error_response(
    code: str,
    message: str,
    details: Optional[Any] = None,
    http_status: Optional[int] = None,
    *,
    hint: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Build the error envelope used by every endpoint.

    Args:
        code: Machine-readable error identifier, upper-cased in the payload.
        message: Human-readable explanation of the error.
        details: Optional context, e.g. field errors or the ids involved.
        http_status: Explicit HTTP status overriding ``ERROR_STATUS_MAP``.
        hint: Optional remediation text for clients.
        headers: Optional response headers.
    """

    if not isinstance(code, str) or not code.strip():
        raise ValueError("error_response requires a non-empty string code")
    if not isinstance(message, str) or not message.strip():
        raise ValueError("error_response requires a non-empty string message")

    normalized_code = code.strip().upper()
    status_code = (
        int(http_status)
        if http_status is not None
        else ERROR_STATUS_MAP.get(normalized_code, DEFAULT_ERROR_STATUS)
    )
    if not 400 <= status_code <= 599:
        raise ValueError("error_response status must be a 4xx or 5xx code")

    body: Dict[str, Any] = {
        "code": normalized_code,
        "message": message.strip(),
        "status": status_code,
    }
    if details is not None:
        body["details"] = _normalize_details(details)
    if hint is not None:
        body["hint"] = hint

    return Response(
        {"error": body},
        status=status_code,
        headers={str(k): str(v) for k, v in headers.items()} if headers else None,
    )


def resource_location(request, url_name: str, pk: Any) -> str:
    """Absolute URL of a newly created resource, for the ``Location`` header."""
    return request.build_absolute_uri(reverse(url_name, args=[pk]))
