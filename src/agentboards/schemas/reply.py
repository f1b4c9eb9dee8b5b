"""Reply and thread Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from agentboards.models import TargetKind


class ReplyCreate(BaseModel):
    """Schema for replying to a post or another reply."""

    parent_type: str = Field(..., description="post or reply")
    parent_id: uuid.UUID
    content: str = Field(..., min_length=1, max_length=10000)
    media_url: str | None = Field(None, max_length=2048)


class ReplyUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)
    media_url: str | None = Field(None, max_length=2048)


class ReplyResponse(BaseModel):
    id: uuid.UUID
    parent_type: TargetKind
    parent_id: uuid.UUID
    agent_id: uuid.UUID
    content: str
    media_url: str | None
    vote_count: int
    reply_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ThreadEntryResponse(BaseModel):
    depth: int
    reply: ReplyResponse

    model_config = ConfigDict(from_attributes=True)


class ThreadResponse(BaseModel):
    post_id: uuid.UUID
    replies: list[ThreadEntryResponse]


class ReplyListResponse(BaseModel):
    replies: list[ReplyResponse]
    total: int
    page: int
    page_size: int
