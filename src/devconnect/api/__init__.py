"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Private routes declare Depends(get_current_user) themselves
rather than at include_router level, because the profile router mixes
public reads (list, by user) with private writes.
"""

from fastapi import APIRouter

from devconnect.api.auth import router as auth_router
from devconnect.api.health import router as health_router
from devconnect.api.posts import router as posts_router
from devconnect.api.profile import router as profile_router
from devconnect.api.users import router as users_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(profile_router, tags=["profile"])
api_router.include_router(posts_router, tags=["posts"])
