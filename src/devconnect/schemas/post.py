"""Pydantic schemas for posts, likes and comments."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    text: str = Field(..., min_length=1)


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1)


class LikeRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID

    model_config = {"from_attributes": True}


class CommentRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PostRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    likes: list[LikeRead] = []
    comments: list[CommentRead] = []
    created_at: datetime

    model_config = {"from_attributes": True}
