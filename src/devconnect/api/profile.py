"""Profile API routes.

Learn: Reads are public; every write acts on the caller's own profile
and goes through ProfileService, which applies the ownership policy.
Routes only translate between HTTP and the service.

- GET    /profile/me                   → own profile
- POST   /profile                      → create or update own profile
- GET    /profile                      → all profiles
- GET    /profile/user/{user_id}       → one user's profile
- DELETE /profile                      → delete own profile, posts and account
- PUT    /profile/experience           → add experience
- DELETE /profile/experience/{exp_id}  → remove experience
- PUT    /profile/education            → add education
- DELETE /profile/education/{edu_id}   → remove education
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.auth.dependencies import CurrentIdentity, get_current_user
from devconnect.db.engine import get_db
from devconnect.errors import ErrorKind, Rejected, http_error, unwrap
from devconnect.schemas.profile import (
    EducationCreate,
    ExperienceCreate,
    ProfileRead,
    ProfileUpsert,
)
from devconnect.services.profile_service import NO_PROFILE, ProfileService
from devconnect.services.user_service import UserService

router = APIRouter(prefix="/profile")


def _svc(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


# ─── Own profile ────────────────────────────────────────

@router.get("/me", response_model=ProfileRead)
async def get_my_profile(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProfileService = Depends(_svc),
):
    profile = await svc.get_by_user(identity.user_id)
    return unwrap(profile if profile is not None else NO_PROFILE)


@router.post("", response_model=ProfileRead)
async def upsert_profile(
    body: ProfileUpsert,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProfileService = Depends(_svc),
):
    """Create the caller's profile, or update it if one exists."""
    return unwrap(await svc.upsert(identity.user_id, body))


@router.delete("")
async def delete_account(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete the caller's profile, posts and user account."""
    unwrap(await UserService(db).delete_account(identity.user_id))
    return {"msg": "User deleted"}


# ─── Public reads ───────────────────────────────────────

@router.get("", response_model=list[ProfileRead])
async def list_profiles(svc: ProfileService = Depends(_svc)):
    return await svc.list_profiles()


@router.get("/user/{user_id}", response_model=ProfileRead)
async def get_profile_by_user(user_id: str, svc: ProfileService = Depends(_svc)):
    profile = await svc.get_by_user(user_id)
    if profile is None:
        raise http_error(Rejected(ErrorKind.NOT_FOUND, "Profile not found"))
    return profile


# ─── Experience ─────────────────────────────────────────

@router.put("/experience", response_model=ProfileRead)
async def add_experience(
    body: ExperienceCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProfileService = Depends(_svc),
):
    return unwrap(await svc.add_experience(identity.user_id, body.model_dump()))


@router.delete("/experience/{exp_id}", response_model=ProfileRead)
async def remove_experience(
    exp_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProfileService = Depends(_svc),
):
    return unwrap(await svc.remove_experience(identity.user_id, exp_id))


# ─── Education ──────────────────────────────────────────

@router.put("/education", response_model=ProfileRead)
async def add_education(
    body: EducationCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProfileService = Depends(_svc),
):
    return unwrap(await svc.add_education(identity.user_id, body.model_dump()))


@router.delete("/education/{edu_id}", response_model=ProfileRead)
async def remove_education(
    edu_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProfileService = Depends(_svc),
):
    return unwrap(await svc.remove_education(identity.user_id, edu_id))
