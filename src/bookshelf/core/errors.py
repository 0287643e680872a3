"""Error taxonomy for the book service.

Every failure that leaves the service layer is a ``ServiceError`` tagged with
exactly one ``ErrorKind``. ``map_exception`` is the single place where
arbitrary exceptions (store driver errors, deadline expiry, bugs) are folded
into that taxonomy.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError


class ErrorKind(str, Enum):
    """Remote-callable error kinds."""

    UNIMPLEMENTED = "unimplemented"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorKind.UNIMPLEMENTED: 501,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNKNOWN: 500,
}


class ServiceError(Exception):
    """Classified failure of a book service call."""

    def __init__(self, kind: ErrorKind, message: str, field: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field = field

    def __repr__(self) -> str:
        return f"ServiceError(kind={self.kind.value!r}, message={self.message!r})"

    @property
    def http_status(self) -> int:
        return self.kind.http_status

    def to_response(self) -> dict[str, Any]:
        """Render the error as the JSON body used by the HTTP gateway."""
        return {
            "error": {
                "kind": self.kind.value,
                "message": self.message,
                "field": self.field,
            }
        }

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> "ServiceError":
        """Rebuild an error from a gateway error body."""
        error = body.get("error") or {}
        try:
            kind = ErrorKind(error.get("kind"))
        except ValueError:
            kind = ErrorKind.UNKNOWN
        return cls(kind, error.get("message") or "unknown error", error.get("field"))


def unimplemented(message: str) -> ServiceError:
    return ServiceError(ErrorKind.UNIMPLEMENTED, message)


def invalid_argument(message: str, field: str | None = None) -> ServiceError:
    return ServiceError(ErrorKind.INVALID_ARGUMENT, message, field)


def not_found(message: str) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, message)


def unknown(message: str, field: str | None = None) -> ServiceError:
    return ServiceError(ErrorKind.UNKNOWN, message, field)


def map_exception(
    exc: BaseException, operation: str, timeout: float | None = None
) -> ServiceError:
    """Classify any failure raised while serving ``operation``."""
    if isinstance(exc, ServiceError):
        return exc
    if isinstance(exc, TimeoutError) and timeout is not None:
        return unknown(f"{operation} abandoned: deadline of {timeout}s exceeded")
    detail = str(exc) or type(exc).__name__
    if isinstance(exc, SQLAlchemyError):
        return unknown(f"{operation} failed in the database: {detail}")
    return unknown(f"{operation} failed: {detail}")


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Wrap store failures raised inside the block as Unknown errors.

    The store's own message is appended to ``message``, e.g.
    ``failed to insert: UNIQUE constraint failed``.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise unknown(f"{message}: {exc}") from exc
