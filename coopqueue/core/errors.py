"""Error kinds returned by services and their HTTP status mapping."""

from enum import Enum


class ErrorKind(str, Enum):
    """Why a service call failed. Services return these; they do not raise them."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


HTTP_STATUS_BY_ERROR: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}

# Shown to callers instead of internal detail.
INTERNAL_ERROR_MESSAGE = "An unexpected internal server error occurred. Please try again later."


def http_status_for(kind: ErrorKind) -> int:
    return HTTP_STATUS_BY_ERROR.get(kind, 500)
