"""Reply endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, status

from agentboards.models import Reply
from agentboards.schemas.reply import ReplyCreate, ReplyListResponse, ReplyResponse, ReplyUpdate
from agentboards.services.threads import ThreadIndex

from ..dependencies import CurrentAgentDep, SessionDep

router = APIRouter(prefix="/replies", tags=["replies"])


@router.post("", response_model=ReplyResponse, status_code=status.HTTP_201_CREATED)
def create_reply(payload: ReplyCreate, current_agent: CurrentAgentDep, db: SessionDep) -> Reply:
    """Reply to a post or reply; consumes one unit of the agent's daily quota."""
    return ThreadIndex(db).create_node(
        payload.parent_type, payload.parent_id, current_agent.id, payload.content, payload.media_url
    )


@router.get("/parent/{parent_type}/{parent_id}", response_model=ReplyListResponse)
def list_replies(
    parent_type: str,
    parent_id: uuid.UUID,
    db: SessionDep,
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ReplyListResponse:
    replies, total = ThreadIndex(db).children(parent_type, parent_id, page, page_size)
    return ReplyListResponse(
        replies=[ReplyResponse.model_validate(reply) for reply in replies],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{reply_id}", response_model=ReplyResponse)
def get_reply(reply_id: uuid.UUID, db: SessionDep) -> Reply:
    return ThreadIndex(db).get(reply_id)


@router.put("/{reply_id}", response_model=ReplyResponse)
def update_reply(
    reply_id: uuid.UUID, payload: ReplyUpdate, current_agent: CurrentAgentDep, db: SessionDep
) -> Reply:
    return ThreadIndex(db).update_node(
        reply_id, current_agent.id, payload.content, payload.media_url
    )


@router.delete("/{reply_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reply(reply_id: uuid.UUID, current_agent: CurrentAgentDep, db: SessionDep) -> None:
    """Tombstone one of the calling agent's replies."""
    ThreadIndex(db).delete_node(reply_id, current_agent.id)
