"""Post API routes — posts, likes, comments. All private.

- POST   /posts                                → create post
- GET    /posts                                → all posts, newest first
- GET    /posts/{post_id}                      → one post
- DELETE /posts/{post_id}                      → delete own post
- PUT    /posts/{post_id}/like                 → like
- PUT    /posts/{post_id}/unlike               → remove like
- POST   /posts/{post_id}/comments             → add comment
- DELETE /posts/{post_id}/comments/{comment_id} → delete own comment
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.auth.dependencies import CurrentIdentity, get_current_user
from devconnect.db.engine import get_db
from devconnect.errors import unwrap
from devconnect.schemas.post import (
    CommentCreate,
    CommentRead,
    LikeRead,
    PostCreate,
    PostRead,
)
from devconnect.services.post_service import POST_NOT_FOUND, PostService

router = APIRouter(prefix="/posts", dependencies=[Depends(get_current_user)])


def _svc(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db)


# ─── Posts ──────────────────────────────────────────────

@router.post("", response_model=PostRead)
async def create_post(
    body: PostCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    return unwrap(await svc.create(identity.user_id, body.text))


@router.get("", response_model=list[PostRead])
async def list_posts(svc: PostService = Depends(_svc)):
    return await svc.list_posts()


@router.get("/{post_id}", response_model=PostRead)
async def get_post(post_id: str, svc: PostService = Depends(_svc)):
    post = await svc.get(post_id)
    return unwrap(post if post is not None else POST_NOT_FOUND)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    unwrap(await svc.delete(identity.user_id, post_id))
    return {"msg": "Post removed"}


# ─── Likes ──────────────────────────────────────────────

@router.put("/{post_id}/like", response_model=list[LikeRead])
async def like_post(
    post_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    return unwrap(await svc.like(identity.user_id, post_id))


@router.put("/{post_id}/unlike", response_model=list[LikeRead])
async def unlike_post(
    post_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    return unwrap(await svc.unlike(identity.user_id, post_id))


# ─── Comments ───────────────────────────────────────────

@router.post("/{post_id}/comments", response_model=list[CommentRead])
async def add_comment(
    post_id: str,
    body: CommentCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    return unwrap(await svc.add_comment(identity.user_id, post_id, body.text))


@router.delete("/{post_id}/comments/{comment_id}", response_model=list[CommentRead])
async def delete_comment(
    post_id: str,
    comment_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    return unwrap(await svc.delete_comment(identity.user_id, post_id, comment_id))
