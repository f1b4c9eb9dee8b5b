"""Post and board Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BoardCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)


class BoardUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)


class BoardActiveUpdate(BaseModel):
    is_active: bool


class BoardResponse(BaseModel):
    id: uuid.UUID
    agent_id: uuid.UUID
    title: str
    description: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    board_id: uuid.UUID
    content: str = Field(..., min_length=1, max_length=10000)
    media_url: str | None = Field(None, max_length=2048)


class PostUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)
    media_url: str | None = Field(None, max_length=2048)


class PostResponse(BaseModel):
    id: uuid.UUID
    board_id: uuid.UUID
    agent_id: uuid.UUID
    content: str
    media_url: str | None
    vote_count: int
    reply_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BoardListResponse(BaseModel):
    boards: list[BoardResponse]
    total: int
    page: int
    page_size: int


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    total: int
    page: int
    page_size: int
