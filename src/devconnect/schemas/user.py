"""Pydantic schemas for registration, login and the current user.

Learn: Validation failures on these bodies are turned into a 400 with
one entry per violated field (see main.validation_exception_handler).
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=18)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str


class UserRead(BaseModel):
    """A user as returned by the API — never includes the password hash."""
    id: uuid.UUID
    name: str
    email: str
    avatar: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    id: uuid.UUID
    name: str
    avatar: Optional[str] = None

    model_config = {"from_attributes": True}
