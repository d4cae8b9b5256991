"""FastAPI auth dependencies — the auth gate for private routes.

Learn: authenticate() is a pure filter: headers in, identity (or a
Rejected) out. It never touches the database and never checks who owns
what. get_current_user wraps it as a Depends() and is the point where a
rejection becomes an HTTP 401.

Token lookup order:
1. The configured token header (x-auth-token by default), passed to
   verify() exactly as received
2. Authorization: Bearer <token>
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

import structlog
from fastapi import Request

from devconnect.auth.jwt import TokenService
from devconnect.errors import ErrorKind, Rejected, http_error

logger = structlog.get_logger()


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated user making the request."""

    user_id: str


def authenticate(
    headers: Mapping[str, str],
    token_service: TokenService,
    header_name: str = "x-auth-token",
) -> Union[CurrentIdentity, Rejected]:
    """Resolve the request's identity from its headers."""
    token = headers.get(header_name)
    if not token:
        authorization = headers.get("authorization", "")
        if authorization.startswith("Bearer "):
            token = authorization[7:]

    if not token:
        return Rejected(
            ErrorKind.UNAUTHENTICATED, "No token, authorization denied"
        )

    result = token_service.verify(token)
    if isinstance(result, Rejected):
        return result
    return CurrentIdentity(user_id=result)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_user(request: Request) -> CurrentIdentity:
    """Extract current identity (required — 401 if missing or invalid)."""
    result = authenticate(
        request.headers,
        get_token_service(request),
        request.app.state.settings.token_header,
    )
    if isinstance(result, Rejected):
        logger.info("auth.rejected", kind=result.kind.value, path=request.url.path)
        raise http_error(result)

    structlog.contextvars.bind_contextvars(user_id=result.user_id)
    return result
