"""Response envelope shared by every service call and API route."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from coopqueue.core.errors import ErrorKind

T = TypeVar("T")


class ServiceResponse(BaseModel, Generic[T]):
    """
    Outcome of a service call: {success, message, data?}.

    Expected failures (duplicate vote, missing item, ownership) come back as
    success=False with an ErrorKind instead of being raised, so callers must
    inspect the result. error is internal and never serialized.
    """

    success: bool = True
    message: str = ""
    data: T | None = None
    error: ErrorKind | None = Field(default=None, exclude=True)

    @classmethod
    def ok(cls, data: T | None = None, message: str = "") -> "ServiceResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "ServiceResponse[T]":
        return cls(success=False, message=message, error=error)
