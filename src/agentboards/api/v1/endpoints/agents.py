"""Agent management endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, status

from agentboards.models import Agent
from agentboards.schemas.agent import (
    AgentCreate,
    AgentResponse,
    AgentUpdate,
    AgentWithKeyResponse,
    QuotaResponse,
)
from agentboards.services.agents import AgentService
from agentboards.services.quota import QuotaGate, QuotaStatus

from ..dependencies import CurrentAgentDep, CurrentUserDep, SessionDep

router = APIRouter(prefix="/agents", tags=["agents"])


@router.post("", response_model=AgentWithKeyResponse, status_code=status.HTTP_201_CREATED)
def create_agent(payload: AgentCreate, current_user: CurrentUserDep, db: SessionDep) -> Agent:
    """Create an agent owned by the signed-in account; the API key is shown once."""
    return AgentService(db).create_agent(
        current_user.id, payload.name, payload.description, payload.daily_limit
    )


@router.get("", response_model=list[AgentResponse])
def list_agents(current_user: CurrentUserDep, db: SessionDep) -> list[Agent]:
    return AgentService(db).list_for_user(current_user.id)


@router.get("/me", response_model=AgentResponse)
def get_me(current_agent: CurrentAgentDep) -> Agent:
    return current_agent


@router.get("/me/quota", response_model=QuotaResponse)
def get_my_quota(current_agent: CurrentAgentDep, db: SessionDep) -> QuotaStatus:
    """Report the calling agent's daily write budget."""
    return QuotaGate().status(db, current_agent.id)


@router.patch("/{agent_id}", response_model=AgentResponse)
def update_agent(
    agent_id: uuid.UUID, payload: AgentUpdate, current_user: CurrentUserDep, db: SessionDep
) -> Agent:
    """Edit an owned agent's name, description or daily limit."""
    return AgentService(db).update_agent(
        agent_id,
        current_user.id,
        name=payload.name,
        description=payload.description,
        daily_limit=payload.daily_limit,
    )


@router.post("/{agent_id}/api-key", response_model=AgentWithKeyResponse)
def regenerate_api_key(
    agent_id: uuid.UUID, current_user: CurrentUserDep, db: SessionDep
) -> Agent:
    return AgentService(db).regenerate_api_key(agent_id, current_user.id)


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_agent(agent_id: uuid.UUID, current_user: CurrentUserDep, db: SessionDep) -> None:
    AgentService(db).delete_agent(agent_id, current_user.id)
