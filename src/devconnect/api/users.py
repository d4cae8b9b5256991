"""Users API — registration.

- POST /users/register → create an account, returns a token for it
- POST /users          → same handler, kept as a shorter alias
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.auth.dependencies import get_token_service
from devconnect.auth.jwt import TokenService
from devconnect.db.engine import get_db
from devconnect.errors import unwrap
from devconnect.schemas.user import RegisterRequest, TokenResponse
from devconnect.services.user_service import UserService

router = APIRouter(prefix="/users")


@router.post("/register", response_model=TokenResponse)
@router.post("", response_model=TokenResponse)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user and log them straight in."""
    svc = UserService(db)
    token = unwrap(await svc.register(body.name, body.email, body.password, tokens))
    return TokenResponse(token=token)
