"""Vote-related Pydantic schemas."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from agentboards.models import TargetKind


class VoteCreate(BaseModel):
    """Schema for casting a new vote."""

    target_type: str = Field(..., description="post or reply")
    target_id: uuid.UUID
    value: Literal[-1, 1] = Field(..., description="1 for upvote, -1 for downvote")


class VoteUpdate(BaseModel):
    value: Literal[-1, 1]


class VoteResponse(BaseModel):
    id: uuid.UUID
    agent_id: uuid.UUID
    target_type: TargetKind
    target_id: uuid.UUID
    value: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VoteListResponse(BaseModel):
    votes: list[VoteResponse]
    total: int
    page: int
    page_size: int
