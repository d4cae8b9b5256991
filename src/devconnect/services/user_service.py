"""User service — registration, login, account deletion.

Learn: Service layer separates business logic from HTTP routing.
Methods return either a value or a Rejected; the route decides what
HTTP response a Rejected becomes. Login deliberately reports "unknown
email" and "wrong password" as the same INVALID_CREDENTIALS rejection
so callers can't probe which emails are registered.
"""

import asyncio
import hashlib
import uuid

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.auth.jwt import TokenService
from devconnect.auth.ownership import assert_owner
from devconnect.auth.password import hash_password, verify_password
from devconnect.db.models import Comment, Like, Post, Profile, User, parse_uuid
from devconnect.errors import ErrorKind, Rejected

logger = structlog.get_logger()

INVALID_CREDENTIALS = Rejected(ErrorKind.INVALID_CREDENTIALS, "Invalid credentials")
DUPLICATE_EMAIL = Rejected(
    ErrorKind.DUPLICATE_EMAIL, "User with this email already exists"
)


def gravatar_url(email: str, size: int = 200) -> str:
    """Deterministic avatar for an email (rated pg, mystery-man fallback)."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"//www.gravatar.com/avatar/{digest}?s={size}&r=pg&d=mm"


class UserService:
    """Credential store access plus the register/login flows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Lookups ────────────────────────────────────────

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def find_by_id(self, user_id: str | uuid.UUID) -> User | None:
        uid = parse_uuid(user_id)
        if uid is None:
            return None
        return await self.db.get(User, uid)

    # ─── Register / login ───────────────────────────────

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        token_service: TokenService,
    ) -> str | Rejected:
        """Create a user and return a token for it."""
        if await self.find_by_email(email):
            return DUPLICATE_EMAIL

        password_hash = await asyncio.to_thread(hash_password, password)
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            avatar=gravatar_url(email),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.db.rollback()
            return DUPLICATE_EMAIL

        logger.info("user.registered", user_id=str(user.id))
        return token_service.issue(str(user.id))

    async def login(
        self,
        email: str,
        password: str,
        token_service: TokenService,
    ) -> str | Rejected:
        """Check credentials and return a fresh token."""
        user = await self.find_by_email(email)
        if not user:
            logger.info("user.login_failed")
            return INVALID_CREDENTIALS

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("user.login_failed", user_id=str(user.id))
            return INVALID_CREDENTIALS

        return token_service.issue(str(user.id))

    # ─── Account deletion ───────────────────────────────

    async def delete_account(self, user_id: str) -> Rejected | None:
        """Delete a user with their profile, posts, comments and likes."""
        user = await self.find_by_id(user_id)
        if not user:
            return Rejected(ErrorKind.NOT_FOUND, "User not found")

        uid = user.id
        result = await self.db.execute(select(Profile).where(Profile.user_id == uid))
        profile = result.scalars().first()
        if profile is not None:
            rejection = assert_owner(profile, user_id, "Profile")
            if rejection:
                return rejection
            await self.db.delete(profile)

        await self.db.execute(delete(Like).where(Like.user_id == uid))
        await self.db.execute(delete(Comment).where(Comment.user_id == uid))

        posts = await self.db.execute(select(Post).where(Post.user_id == uid))
        for post in posts.scalars().all():
            await self.db.delete(post)

        # Children must be gone before the users row (no ORM relationship orders it)
        await self.db.flush()
        await self.db.delete(user)
        await self.db.commit()
        logger.info("user.deleted", user_id=str(uid))
        return None
