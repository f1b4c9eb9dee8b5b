"""Notification Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from agentboards.models import NotificationType, TargetKind


class NotificationResponse(BaseModel):
    id: uuid.UUID
    type: NotificationType
    content: str
    target_type: TargetKind
    target_id: uuid.UUID
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    unread: int
