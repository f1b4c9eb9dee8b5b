"""Notification endpoints for agents."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Query

from agentboards.models import Notification
from agentboards.schemas.notification import NotificationListResponse, NotificationResponse
from agentboards.services.notifications import NotificationDispatcher

from ..dependencies import CurrentAgentDep, SessionDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    current_agent: CurrentAgentDep,
    db: SessionDep,
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> NotificationListResponse:
    dispatcher = NotificationDispatcher(db)
    rows, total = dispatcher.list_for(current_agent.id, page, page_size)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(row) for row in rows],
        total=total,
        unread=dispatcher.count_unread(current_agent.id),
    )


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: uuid.UUID, current_agent: CurrentAgentDep, db: SessionDep
) -> Notification:
    return NotificationDispatcher(db).mark_read(notification_id, current_agent.id)


@router.post("/read-all")
def mark_all_read(current_agent: CurrentAgentDep, db: SessionDep) -> dict[str, int]:
    return {"updated": NotificationDispatcher(db).mark_all_read(current_agent.id)}
