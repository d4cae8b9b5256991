"""Pydantic schemas for profiles, experience and education.

Learn: Separate "input" schemas (ProfileUpsert, ExperienceCreate, ...)
from "Read" schemas. None of the input schemas has a user_id field, so
the owner of a profile can only ever come from the authenticated identity.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from devconnect.schemas.user import UserSummary

SOCIAL_NETWORKS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


# ─── Profile ────────────────────────────────────────────

class ProfileUpsert(BaseModel):
    status: str = Field(..., min_length=1, max_length=100)
    skills: list[str] = Field(..., min_length=1)
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    githubusername: Optional[str] = None

    # Social links
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, v):
        """Accept "python, sql" as well as ["python", "sql"]."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    def profile_fields(self) -> dict:
        """Column values for a new Profile row, social links folded into one dict."""
        data = self.model_dump(exclude=set(SOCIAL_NETWORKS))
        data["social"] = {
            net: getattr(self, net) for net in SOCIAL_NETWORKS if getattr(self, net)
        }
        return data

    def profile_updates(self) -> tuple[dict, dict]:
        """Only the fields present in the request body.

        Returns (columns, social). A network sent as null or "" is removed
        from the existing links; networks not sent are left alone.
        """
        sent = self.model_fields_set
        columns = self.model_dump(include=sent - set(SOCIAL_NETWORKS))
        social = {net: getattr(self, net) for net in SOCIAL_NETWORKS if net in sent}
        return columns, social


# ─── Experience / Education ─────────────────────────────

class ExperienceCreate(BaseModel):
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: Optional[str] = None
    from_date: date
    to_date: Optional[date] = None
    current: bool = False
    description: Optional[str] = None


class ExperienceRead(ExperienceCreate):
    id: uuid.UUID

    model_config = {"from_attributes": True}


class EducationCreate(BaseModel):
    school: str = Field(..., min_length=1)
    degree: str = Field(..., min_length=1)
    fieldofstudy: str = Field(..., min_length=1)
    from_date: date
    to_date: Optional[date] = None
    current: bool = False
    description: Optional[str] = None


class EducationRead(EducationCreate):
    id: uuid.UUID

    model_config = {"from_attributes": True}


class ProfileRead(BaseModel):
    id: uuid.UUID
    user: UserSummary
    status: str
    skills: list[str]
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    social: dict[str, str] = {}
    experience: list[ExperienceRead] = []
    education: list[EducationRead] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
