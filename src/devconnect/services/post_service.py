"""Post service — posts, likes and comments.

Learn: Posts are public-readable (any authenticated user can list and
read them) but only the author may delete a post, and only a comment's
author may delete that comment. Comment deletion matches the comment by
id first, checks ownership on that exact comment, then deletes that row.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.auth.ownership import assert_owner
from devconnect.db.models import Comment, Like, Post, User, parse_uuid
from devconnect.errors import ErrorKind, Rejected

logger = structlog.get_logger()

USER_NOT_FOUND = Rejected(ErrorKind.NOT_FOUND, "User not found")
POST_NOT_FOUND = Rejected(ErrorKind.NOT_FOUND, "Post not found")
ALREADY_LIKED = Rejected(ErrorKind.VALIDATION, "Post already liked")
NOT_LIKED = Rejected(ErrorKind.VALIDATION, "Post has not yet been liked")


class PostService:
    """Business logic for the post feed."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ──────────────────────────────────────────

    async def get(self, post_id: str | uuid.UUID) -> Post | None:
        pid = parse_uuid(post_id)
        if pid is None:
            return None
        result = await self.db.execute(
            select(Post)
            .where(Post.id == pid)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list_posts(self) -> list[Post]:
        result = await self.db.execute(select(Post).order_by(Post.created_at.desc()))
        return list(result.scalars().all())

    # ─── Posts ──────────────────────────────────────────

    async def create(self, acting: str, text: str) -> Post | Rejected:
        author = await self._author(acting)
        if author is None:
            return USER_NOT_FOUND

        post = Post(
            user_id=author.id,
            text=text,
            name=author.name,
            avatar=author.avatar,
        )
        self.db.add(post)
        await self.db.commit()
        logger.info("post.created", post_id=str(post.id))
        return await self.get(post.id)

    async def delete(self, acting: str, post_id: str) -> Rejected | None:
        post = await self.get(post_id)
        rejection = assert_owner(post, acting, "Post")
        if rejection:
            return rejection

        await self.db.delete(post)
        await self.db.commit()
        logger.info("post.deleted", post_id=str(post.id))
        return None

    # ─── Likes ──────────────────────────────────────────

    async def like(self, acting: str, post_id: str) -> list[Like] | Rejected:
        post = await self.get(post_id)
        if post is None:
            return POST_NOT_FOUND
        user = await self._author(acting)
        if user is None:
            return USER_NOT_FOUND
        if any(like.user_id == user.id for like in post.likes):
            return ALREADY_LIKED

        self.db.add(Like(post_id=post.id, user_id=user.id))
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent request from the same user got there first
            await self.db.rollback()
            return ALREADY_LIKED
        return (await self.get(post.id)).likes

    async def unlike(self, acting: str, post_id: str) -> list[Like] | Rejected:
        post = await self.get(post_id)
        if post is None:
            return POST_NOT_FOUND
        user = await self._author(acting)
        if user is None:
            return USER_NOT_FOUND
        like = next((lk for lk in post.likes if lk.user_id == user.id), None)
        if like is None:
            return NOT_LIKED

        await self.db.delete(like)
        await self.db.commit()
        return (await self.get(post.id)).likes

    # ─── Comments ───────────────────────────────────────

    async def add_comment(
        self, acting: str, post_id: str, text: str
    ) -> list[Comment] | Rejected:
        post = await self.get(post_id)
        if post is None:
            return POST_NOT_FOUND
        author = await self._author(acting)
        if author is None:
            return USER_NOT_FOUND

        self.db.add(
            Comment(
                post_id=post.id,
                user_id=author.id,
                text=text,
                name=author.name,
                avatar=author.avatar,
            )
        )
        await self.db.commit()
        return (await self.get(post.id)).comments

    async def delete_comment(
        self, acting: str, post_id: str, comment_id: str
    ) -> list[Comment] | Rejected:
        post = await self.get(post_id)
        if post is None:
            return POST_NOT_FOUND

        target = parse_uuid(comment_id)
        comment = next((c for c in post.comments if c.id == target), None)
        rejection = assert_owner(comment, acting, "Comment")
        if rejection:
            return rejection

        await self.db.delete(comment)
        await self.db.commit()
        logger.info("comment.deleted", post_id=str(post.id), comment_id=str(target))
        return (await self.get(post.id)).comments

    async def _author(self, acting: str) -> User | None:
        uid = parse_uuid(acting)
        if uid is None:
            return None
        return await self.db.get(User, uid)
