"""Typed errors raised by the API client.

Every failure a caller can see is one of the ``APIError`` subclasses below;
raw ``httpx`` and pydantic exceptions never leave the client.  ``str(err)``
gives a short readable form such as ``server(Board is archived)``.
"""

from __future__ import annotations

from enum import Enum

from stickyboard.models import ErrorCode, ErrorPayload


class ErrorKind(str, Enum):
    SERVER = "server"
    AUTH_INVALID = "authInvalid"
    AUTH_EXPIRED = "authExpired"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "notFound"
    VALIDATION = "validation"
    TRANSPORT = "transport"
    DECODING = "decoding"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class APIError(Exception):
    """Base class for all client errors."""

    kind: ErrorKind

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "")
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}({self.message or ''})"


class ServerError(APIError):
    kind = ErrorKind.SERVER


class AuthInvalidError(APIError):
    kind = ErrorKind.AUTH_INVALID


class AuthExpiredError(APIError):
    kind = ErrorKind.AUTH_EXPIRED


class ForbiddenError(APIError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(APIError):
    kind = ErrorKind.NOT_FOUND


class ValidationAPIError(APIError):
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        super().__init__(message)
        self.details = details

    def __str__(self) -> str:
        return f"validation({self.message or ''}, details: {self.details or ''})"


class TransportError(APIError):
    """The request never produced an HTTP response (DNS, connect, timeout...)."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(str(underlying) or type(underlying).__name__)
        self.underlying = underlying


class DecodingError(APIError):
    kind = ErrorKind.DECODING


class RequestCancelledError(APIError):
    kind = ErrorKind.CANCELLED

    def __str__(self) -> str:
        return "cancelled"


class UnknownAPIError(APIError):
    kind = ErrorKind.UNKNOWN

    def __init__(self, status: int | None = None, body: str | None = None) -> None:
        super().__init__(body)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        status = self.status if self.status is not None else -1
        body = self.body if self.body is not None else "<nil>"
        return f"unknown(status: {status}, body: {body})"


class TokenStorageError(UnknownAPIError):
    """The system credential store refused to read or write a token."""

    def __init__(self, message: str) -> None:
        super().__init__(None, message)


_PAYLOAD_ERRORS: dict[ErrorCode, type[APIError]] = {
    ErrorCode.SERVER_ERROR: ServerError,
    ErrorCode.AUTH_INVALID: AuthInvalidError,
    ErrorCode.AUTH_EXPIRED: AuthExpiredError,
    ErrorCode.FORBIDDEN: ForbiddenError,
    ErrorCode.NOT_FOUND: NotFoundError,
}


def map_error_payload(payload: ErrorPayload) -> APIError:
    """Translate a server error payload into its typed error."""
    if payload.code is ErrorCode.VALIDATION_ERROR:
        return ValidationAPIError(payload.message, details=payload.details)
    return _PAYLOAD_ERRORS[payload.code](payload.message)
