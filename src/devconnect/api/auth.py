"""Auth API — login and the current user.

- POST /auth → email/password → token
- GET /auth → the authenticated user (no password hash)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.auth.dependencies import (
    CurrentIdentity,
    get_current_user,
    get_token_service,
)
from devconnect.auth.jwt import TokenService
from devconnect.db.engine import get_db
from devconnect.errors import ErrorKind, Rejected, http_error, unwrap
from devconnect.schemas.user import LoginRequest, TokenResponse, UserRead
from devconnect.services.user_service import UserService

router = APIRouter(prefix="/auth")


@router.get("", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info.

    The token alone proves nothing about the account still existing,
    so a token for a deleted user gets NOT_FOUND here.
    """
    user = await UserService(db).find_by_id(identity.user_id)
    if user is None:
        raise http_error(Rejected(ErrorKind.NOT_FOUND, "User not found"))
    return user


@router.post("", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with email and password → JWT token."""
    token = unwrap(await UserService(db).login(body.email, body.password, tokens))
    return TokenResponse(token=token)
