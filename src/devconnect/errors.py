"""Typed rejections and their HTTP mapping.

Learn: The token service, the auth gate, the ownership policy and the
services return a Rejected value instead of raising. Route handlers are
the only place that turns a Rejected into an HTTP response, via
http_error(). This keeps "not found" / "not allowed" out of exception
control flow until the very edge of the app.
"""

import enum
from dataclasses import dataclass

from fastapi import HTTPException


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation_error"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UNAUTHENTICATED = "unauthenticated"
    INVALID_TOKEN = "invalid_token"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"
    INTERNAL = "internal"


# Token failures all surface as 401 so clients re-authenticate.
_STATUS = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.EXPIRED: 401,
    ErrorKind.INVALID_SIGNATURE: 401,
    ErrorKind.MALFORMED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 400,
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE_EMAIL: 400,
    ErrorKind.INVALID_CREDENTIALS: 400,
    ErrorKind.INTERNAL: 500,
}

TOKEN_FAILURES = frozenset(
    {
        ErrorKind.UNAUTHENTICATED,
        ErrorKind.INVALID_TOKEN,
        ErrorKind.EXPIRED,
        ErrorKind.INVALID_SIGNATURE,
        ErrorKind.MALFORMED,
    }
)


@dataclass(frozen=True)
class Rejected:
    """A refused operation: what kind of refusal, and a short client message."""

    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return _STATUS[self.kind]

    def body(self) -> dict:
        return {"kind": self.kind.value, "msg": self.message}


INTERNAL_ERROR = Rejected(ErrorKind.INTERNAL, "Internal server error")


def http_error(rejected: Rejected) -> HTTPException:
    """Convert a Rejected into the HTTPException the route should raise."""
    headers = None
    if rejected.kind in TOKEN_FAILURES:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=rejected.status_code,
        detail=rejected.body(),
        headers=headers,
    )


def unwrap(result):
    """Return `result` unchanged, or raise the HTTPException for a Rejected."""
    if isinstance(result, Rejected):
        raise http_error(result)
    return result
