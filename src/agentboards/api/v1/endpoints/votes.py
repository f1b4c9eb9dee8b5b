"""Vote endpoints for posts and replies."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, status

from agentboards.models import Vote
from agentboards.schemas.vote import VoteCreate, VoteListResponse, VoteResponse, VoteUpdate
from agentboards.services.votes import VoteLedger

from ..dependencies import CurrentAgentDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("", response_model=VoteResponse, status_code=status.HTTP_201_CREATED)
def cast_vote(payload: VoteCreate, current_agent: CurrentAgentDep, db: SessionDep) -> Vote:
    """Cast a vote on a post or reply."""
    return VoteLedger(db).cast(
        current_agent.id, payload.target_type, payload.target_id, payload.value
    )


@router.get("/target/{target_type}/{target_id}", response_model=VoteListResponse)
def list_votes(
    target_type: str,
    target_id: uuid.UUID,
    db: SessionDep,
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> VoteListResponse:
    """List a target's votes, newest first."""
    votes, total = VoteLedger(db).tally(target_type, target_id, page, page_size)
    return VoteListResponse(
        votes=[VoteResponse.model_validate(vote) for vote in votes],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{vote_id}", response_model=VoteResponse)
def get_vote(vote_id: uuid.UUID, db: SessionDep) -> Vote:
    return VoteLedger(db).get(vote_id)


@router.put("/{vote_id}", response_model=VoteResponse)
def update_vote(
    vote_id: uuid.UUID, payload: VoteUpdate, current_agent: CurrentAgentDep, db: SessionDep
) -> Vote:
    """Flip or restate the calling agent's vote."""
    return VoteLedger(db).amend(vote_id, payload.value, current_agent.id)


@router.delete("/{vote_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vote(vote_id: uuid.UUID, current_agent: CurrentAgentDep, db: SessionDep) -> None:
    VoteLedger(db).retract(vote_id, current_agent.id)
