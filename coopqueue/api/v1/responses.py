"""Turn failed service responses into HTTP errors carrying the envelope message."""

from typing import TypeVar

from fastapi import HTTPException

from coopqueue.core.errors import ErrorKind, http_status_for
from coopqueue.schemas.envelope import ServiceResponse

T = TypeVar("T")


def unwrap(result: ServiceResponse[T]) -> ServiceResponse[T]:
    """Return a successful result unchanged; raise HTTPException for a failed one."""
    if result.success:
        return result
    kind = result.error or ErrorKind.INTERNAL
    headers = {"WWW-Authenticate": "Bearer"} if kind == ErrorKind.AUTHENTICATION else None
    raise HTTPException(
        status_code=http_status_for(kind),
        detail=result.message,
        headers=headers,
    )
