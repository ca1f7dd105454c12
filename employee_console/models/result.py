"""Result values returned by the API client and the controllers."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    UNSUPPORTED_FILE = "unsupported_file"


class ApiError(BaseModel):
    """A failed operation: what went wrong and the message to show."""

    kind: ErrorKind
    message: str
    status: int | None = None
    field: str | None = None
    from_server: bool = False

    @classmethod
    def from_status(cls, status: int, message: str | None = None) -> ApiError:
        if status == 401:
            kind = ErrorKind.AUTH
        elif status == 404:
            kind = ErrorKind.NOT_FOUND
        else:
            kind = ErrorKind.TRANSPORT
        if message:
            return cls(kind=kind, status=status, message=message, from_server=True)
        return cls(kind=kind, status=status, message=f"Request failed with status {status}")

    def describe(self, fallback: str) -> str:
        """Server-supplied message if there is one, else ``fallback``."""
        if self.from_server or self.kind in (ErrorKind.VALIDATION, ErrorKind.UNSUPPORTED_FILE):
            return self.message
        return fallback


class ApiResult(BaseModel):
    ok: bool
    data: Any = None
    status: int | None = None
    error: ApiError | None = None

    @classmethod
    def success(cls, data: Any = None, status: int | None = None) -> ApiResult:
        return cls(ok=True, data=data, status=status)

    @classmethod
    def failure(cls, error: ApiError) -> ApiResult:
        return cls(ok=False, status=error.status, error=error)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str, *, field: str | None = None) -> ApiResult:
        return cls.failure(ApiError(kind=kind, message=message, field=field))

    @property
    def is_unauthorized(self) -> bool:
        return self.error is not None and self.error.kind is ErrorKind.AUTH

    @property
    def is_not_found(self) -> bool:
        return self.error is not None and self.error.kind is ErrorKind.NOT_FOUND

    def with_fallback(self, fallback: str) -> ApiResult:
        """Copy whose error message is the one the user should see."""
        if self.error is None:
            return self
        error = self.error.model_copy(update={"message": self.error.describe(fallback)})
        return self.model_copy(update={"error": error})
