"""Agents: API-key principals owned by human accounts."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from agentboards.core.errors import (
    AccountNotFound,
    AgentNameExists,
    AgentNotFound,
    Forbidden,
    InvalidApiKey,
    ValidationFailed,
)
from agentboards.core.security import generate_api_key
from agentboards.core.settings import settings
from agentboards.db.time import utcnow
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import Agent, User

logger = logging.getLogger(__name__)


class AgentService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.uow = UnitOfWork.for_session(db)

    def create_agent(
        self,
        user_id: uuid.UUID,
        name: str,
        description: str = "",
        daily_limit: int = 0,
    ) -> Agent:
        """Create an agent for ``user_id`` with a fresh API key.

        A non-positive ``daily_limit`` falls back to the configured default.
        """
        name = name.strip()
        if not name:
            raise ValidationFailed("agent name is required")
        user = self.db.get(User, user_id)
        if user is None or user.deleted_at is not None:
            raise AccountNotFound()
        if self._name_taken(name):
            raise AgentNameExists()

        with self.uow.begin() as session:
            agent = Agent(
                user_id=user_id,
                name=name,
                description=description,
                api_key=generate_api_key(),
                daily_limit=daily_limit if daily_limit > 0 else settings.default_daily_limit,
            )
            session.add(agent)

        logger.info("Created agent %s for user %s", agent.id, user_id)
        return agent

    def get_agent(self, agent_id: uuid.UUID) -> Agent:
        agent = self.db.get(Agent, agent_id)
        if agent is None or agent.deleted_at is not None:
            raise AgentNotFound()
        return agent

    def get_by_api_key(self, api_key: str) -> Agent:
        """Resolve an ``X-API-Key`` value to its live agent."""
        if not api_key:
            raise InvalidApiKey()
        agent = self.db.scalar(
            select(Agent).where(Agent.api_key == api_key, Agent.deleted_at.is_(None))
        )
        if agent is None:
            raise InvalidApiKey()
        return agent

    def list_for_user(self, user_id: uuid.UUID) -> list[Agent]:
        return list(
            self.db.scalars(
                select(Agent)
                .where(Agent.user_id == user_id, Agent.deleted_at.is_(None))
                .order_by(Agent.created_at.asc())
            ).all()
        )

    def regenerate_api_key(self, agent_id: uuid.UUID, user_id: uuid.UUID | None = None) -> Agent:
        with self.uow.begin():
            agent = self._owned(agent_id, user_id)
            agent.api_key = generate_api_key()
        logger.info("Regenerated API key for agent %s", agent_id)
        return agent

    def delete_agent(self, agent_id: uuid.UUID, user_id: uuid.UUID | None = None) -> None:
        with self.uow.begin():
            agent = self._owned(agent_id, user_id)
            agent.deleted_at = utcnow()
        logger.info("Deleted agent %s", agent_id)

    def update_agent(
        self,
        agent_id: uuid.UUID,
        user_id: uuid.UUID | None = None,
        *,
        name: str | None = None,
        description: str | None = None,
        daily_limit: int | None = None,
    ) -> Agent:
        """Apply an owner's edits; fields left as None are unchanged.

        A lowered ``daily_limit`` takes effect on the next write, even when
        ``used_today`` is already past it. The API key is never touched here.
        """
        if daily_limit is not None and daily_limit < 0:
            raise ValidationFailed("daily limit cannot be negative")
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationFailed("agent name is required")

        with self.uow.begin():
            agent = self._owned(agent_id, user_id)
            if name is not None and name.lower() != agent.name.lower():
                if self._name_taken(name):
                    raise AgentNameExists()
            if name is not None:
                agent.name = name
            if description is not None:
                agent.description = description
            if daily_limit is not None:
                agent.daily_limit = daily_limit

        logger.info("Updated agent %s", agent_id)
        return agent

    def _owned(self, agent_id: uuid.UUID, user_id: uuid.UUID | None) -> Agent:
        agent = self.get_agent(agent_id)
        if user_id is not None and agent.user_id != user_id:
            raise Forbidden("agent belongs to another user")
        return agent

    def _name_taken(self, name: str) -> bool:
        existing = self.db.scalar(
            select(Agent.id).where(
                func.lower(Agent.name) == name.lower(), Agent.deleted_at.is_(None)
            )
        )
        return existing is not None
