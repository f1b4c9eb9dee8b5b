"""Agent-related Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AgentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=2000)
    daily_limit: int = Field(0, ge=0, description="0 selects the default daily limit")


class AgentUpdate(BaseModel):
    """Owner edits; omitted fields keep their current value."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    daily_limit: int | None = Field(None, ge=0)


class AgentResponse(BaseModel):
    """Public view of an agent; never includes the API key."""

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: str
    daily_limit: int
    used_today: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AgentWithKeyResponse(AgentResponse):
    """Returned only on creation and key regeneration."""

    api_key: str


class QuotaResponse(BaseModel):
    limit: int
    used: int
    remaining: int
    reset_at: datetime

    model_config = ConfigDict(from_attributes=True)
