"""Profile service — profiles and their experience/education entries.

Learn: Every mutation goes through assert_owner() before touching the
row, even where the profile was looked up by the caller's own id. Keeps
one policy in one place instead of per-route comparisons.

Profile updates are read-modify-write on a single row: two concurrent
updates of the same profile are last-writer-wins. Experience and
education entries are separate rows, so adding one never rewrites the
others and removal is by entry id.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.auth.ownership import assert_owner
from devconnect.db.models import Education, Experience, Profile, User, parse_uuid
from devconnect.errors import ErrorKind, Rejected
from devconnect.schemas.profile import ProfileUpsert

logger = structlog.get_logger()

NO_PROFILE = Rejected(ErrorKind.NOT_FOUND, "There is no profile for this user")


class ProfileService:
    """Business logic for profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads (public) ─────────────────────────────────

    async def get_by_user(self, user_id: str | uuid.UUID) -> Profile | None:
        uid = parse_uuid(user_id)
        if uid is None:
            return None
        result = await self.db.execute(
            select(Profile)
            .where(Profile.user_id == uid)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list_profiles(self) -> list[Profile]:
        result = await self.db.execute(
            select(Profile).order_by(Profile.created_at.desc())
        )
        return list(result.scalars().all())

    # ─── Create / update ────────────────────────────────

    async def upsert(self, acting: str, body: ProfileUpsert) -> Profile | Rejected:
        """Create the caller's profile, or update it if it already exists.

        An update only touches the fields present in the request; omitted
        optional fields keep their stored values.
        """
        profile = await self.get_by_user(acting)
        if profile is None:
            owner = await self.db.get(User, parse_uuid(acting))
            if owner is None:
                return Rejected(ErrorKind.NOT_FOUND, "User not found")
            profile = Profile(user_id=owner.id, **body.profile_fields())
            self.db.add(profile)
            await self.db.commit()
            logger.info("profile.created", profile_id=str(profile.id))
            return await self.get_by_user(acting)

        rejection = assert_owner(profile, acting, "Profile")
        if rejection:
            return rejection

        columns, social = body.profile_updates()
        for key, value in columns.items():
            setattr(profile, key, value)
        if social:
            merged = {**(profile.social or {}), **social}
            # New dict so the JSON column registers the change
            profile.social = {net: url for net, url in merged.items() if url}
        await self.db.commit()
        logger.info("profile.updated", profile_id=str(profile.id))
        return await self.get_by_user(acting)

    # ─── Experience / Education ─────────────────────────

    async def add_experience(self, acting: str, data: dict) -> Profile | Rejected:
        return await self._add_entry(acting, Experience, data)

    async def remove_experience(
        self, acting: str, exp_id: str
    ) -> Profile | Rejected:
        return await self._remove_entry(acting, "experience", exp_id, "Experience")

    async def add_education(self, acting: str, data: dict) -> Profile | Rejected:
        return await self._add_entry(acting, Education, data)

    async def remove_education(
        self, acting: str, edu_id: str
    ) -> Profile | Rejected:
        return await self._remove_entry(acting, "education", edu_id, "Education")

    async def _add_entry(self, acting: str, model, data: dict) -> Profile | Rejected:
        profile = await self.get_by_user(acting)
        if profile is None:
            return NO_PROFILE
        rejection = assert_owner(profile, acting, "Profile")
        if rejection:
            return rejection

        self.db.add(model(profile_id=profile.id, **data))
        await self.db.commit()
        return await self.get_by_user(acting)

    async def _remove_entry(
        self, acting: str, collection: str, entry_id: str, what: str
    ) -> Profile | Rejected:
        profile = await self.get_by_user(acting)
        if profile is None:
            return NO_PROFILE
        rejection = assert_owner(profile, acting, "Profile")
        if rejection:
            return rejection

        target = parse_uuid(entry_id)
        entry = next(
            (e for e in getattr(profile, collection) if e.id == target), None
        )
        if entry is None:
            return Rejected(ErrorKind.NOT_FOUND, f"{what} not found")

        await self.db.delete(entry)
        await self.db.commit()
        logger.info(
            "profile.entry_removed", collection=collection, entry_id=str(target)
        )
        return await self.get_by_user(acting)
