from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, Union

from django.core.exceptions import (
    ObjectDoesNotExist,
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    Throttled,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

STATUS_CODE_DEFAULTS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("VALIDATION_ERROR", _("Validation failed")),
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHORIZED", _("Authentication required")),
    status.HTTP_403_FORBIDDEN: (
        "FORBIDDEN",
        _("You do not have permission to perform this action"),
    ),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", _("Resource not found")),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", _("Method not allowed")),
    status.HTTP_409_CONFLICT: ("CONFLICT", _("Resource conflict")),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: (
        "UNSUPPORTED_MEDIA_TYPE",
        _("Unsupported media type"),
    ),
    status.HTTP_429_TOO_MANY_REQUESTS: ("TOO_MANY_REQUESTS", _("Request was throttled")),
    status.HTTP_500_INTERNAL_SERVER_ERROR: ("SERVER_ERROR", _("Something went wrong")),
}


class ApplicationError(Exception):
    """
    Base class for errors a service wants rendered as an error envelope.

    Subclasses fix ``default_code`` and a default HTTP status; callers may
    still override ``status_code`` and attach ``details`` (for example the
    ids that could not be resolved) or a remediation ``hint``.
    """

    default_code = "SERVER_ERROR"

    def __init__(
        self,
        code: Optional[str] = None,
        message: str = "Something went wrong",
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.hint = hint
        self.headers = headers

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            headers=self.headers,
        )


class ResourceNotFoundError(ApplicationError):
    """The requested entity (or one it references) does not exist."""

    default_code = "NOT_FOUND"

    def __init__(self, message: str = "Entity not found", **kwargs: Any):
        kwargs.setdefault("status_code", status.HTTP_404_NOT_FOUND)
        super().__init__(self.default_code, message, **kwargs)


class DatabaseError(ApplicationError):
    """A write was rejected by a foreign key or uniqueness constraint."""

    default_code = "DATABASE_ERROR"

    def __init__(self, message: str = "Integrity violation", **kwargs: Any):
        kwargs.setdefault("status_code", status.HTTP_409_CONFLICT)
        super().__init__(self.default_code, message, **kwargs)


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """
    DRF ``EXCEPTION_HANDLER`` returning the structured error envelope.
    """

    bound_logger = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        bound_logger.info(
            "Handled application error",
            code=exc.code,
            status=exc.status_code,
            detail=exc.message,
        )
        return exc.to_response()

    if isinstance(exc, ObjectDoesNotExist):
        exc = NotFound(str(exc) or None)
    elif isinstance(exc, DjangoValidationError):
        exc = ValidationError(_normalize_django_validation_error(exc))

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _from_drf_exception(exc, response, bound_logger)

    bound_logger.exception("Unhandled exception bubbled to global handler")
    return error_response(
        "SERVER_ERROR",
        "Something went wrong",
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _from_drf_exception(exc: Exception, response: Response, bound_logger) -> Response:
    status_code = response.status_code
    code, message, details, hint = _normalize_payload(exc, response.data, status_code)
    headers = {
        key: value
        for key, value in response.items()
        if key.lower() in ("www-authenticate", "retry-after", "allow")
    }
    if status_code >= 500:
        bound_logger.error("Converted server error", code=code, status=status_code)
    else:
        bound_logger.info("Converted API exception", code=code, status=status_code)
    return error_response(
        code,
        message,
        details,
        http_status=status_code,
        hint=hint,
        headers=headers or None,
    )


def _normalize_django_validation_error(
    exc: DjangoValidationError,
) -> Union[Dict[str, Any], list]:
    if hasattr(exc, "error_dict"):
        return exc.message_dict
    return list(exc.messages)


BEARER_HINT = "Send an access token as 'Authorization: Bearer <token>'."

# (exception types, code, fallback message); first match wins
DRF_ERROR_CODES = (
    ((ParseError,), "VALIDATION_ERROR", "Malformed request"),
    ((NotAuthenticated, AuthenticationFailed), "UNAUTHORIZED", "Authentication required"),
    (
        (PermissionDenied, DjangoPermissionDenied),
        "FORBIDDEN",
        "You do not have permission to perform this action",
    ),
    ((NotFound, Http404), "NOT_FOUND", "Resource not found"),
    ((MethodNotAllowed,), "METHOD_NOT_ALLOWED", "Method not allowed"),
    ((Throttled,), "TOO_MANY_REQUESTS", "Request was throttled"),
)


def _normalize_payload(
    exc: Exception,
    payload: Any,
    status_code: int,
) -> Tuple[str, str, Optional[Any], Optional[str]]:
    if isinstance(exc, ValidationError):
        return "VALIDATION_ERROR", str(_("Validation failed")), payload, None

    for exc_types, code, fallback in DRF_ERROR_CODES:
        if not isinstance(exc, exc_types):
            continue
        message = _extract_message(payload, fallback, status_code)
        if code == "UNAUTHORIZED":
            return code, message, None, BEARER_HINT
        wait = getattr(exc, "wait", None)
        if wait is not None:
            return code, message, {"retryAfter": wait}, "Wait before retrying this request."
        return code, message, None, None

    code, default_message = STATUS_CODE_DEFAULTS.get(
        status_code,
        (
            "SERVER_ERROR" if status_code >= 500 else "UNKNOWN_ERROR",
            "Something went wrong" if status_code >= 500 else "Request failed",
        ),
    )
    details = payload if status_code < 500 and isinstance(payload, (dict, list)) and payload else None
    return code, _extract_message(payload, str(default_message), status_code), details, None


def _extract_message(payload: Any, fallback: str, status_code: int) -> str:
    if status_code >= 500:
        return str(STATUS_CODE_DEFAULTS[status.HTTP_500_INTERNAL_SERVER_ERROR][1])
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = [
    "ApplicationError",
    "DatabaseError",
    "ResourceNotFoundError",
    "global_exception_handler",
]
