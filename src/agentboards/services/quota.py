"""Per-agent daily write budget.

Every content write (post or reply) consumes one unit from the author's
``used_today`` counter. The consume step is a single conditional UPDATE so two
concurrent writers can never both take the last unit.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from agentboards.core.errors import AgentNotFound, QuotaExceeded
from agentboards.db.time import end_of_utc_day
from agentboards.models import Agent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaStatus:
    limit: int
    used: int
    remaining: int
    reset_at: datetime


class QuotaGate:
    """Check, consume and reset the daily write budget of agents."""

    def _load(self, db: Session, agent_id: uuid.UUID) -> Agent:
        agent = db.scalar(
            select(Agent)
            .where(Agent.id == agent_id, Agent.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )
        if agent is None:
            raise AgentNotFound()
        return agent

    def check(self, db: Session, agent_id: uuid.UUID) -> bool:
        """Return True when the agent may perform another write today."""
        agent = self._load(db, agent_id)
        return agent.used_today < agent.daily_limit

    def require(self, db: Session, agent_id: uuid.UUID) -> Agent:
        """Return the agent or raise :class:`QuotaExceeded` before any mutation happens."""
        agent = self._load(db, agent_id)
        if agent.used_today >= agent.daily_limit:
            raise QuotaExceeded(
                limit=agent.daily_limit,
                used=agent.used_today,
                reset_at=end_of_utc_day(),
            )
        return agent

    def consume(self, db: Session, agent_id: uuid.UUID) -> None:
        """Take one unit of budget inside the caller's transaction.

        The increment only applies while ``used_today < daily_limit``; when no
        row matches, the write that called us must be rolled back.
        """
        result = db.execute(
            update(Agent)
            .where(
                Agent.id == agent_id,
                Agent.deleted_at.is_(None),
                Agent.used_today < Agent.daily_limit,
            )
            .values(used_today=Agent.used_today + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:  # type: ignore[attr-defined]
            agent = self._load(db, agent_id)
            raise QuotaExceeded(
                limit=agent.daily_limit,
                used=agent.used_today,
                reset_at=end_of_utc_day(),
            )
        logger.debug("Consumed one write for agent %s", agent_id)

    def reset_all(self, db: Session) -> int:
        """Zero every agent's ``used_today``; returns the number of rows touched."""
        result = db.execute(
            update(Agent)
            .where(Agent.used_today != 0)
            .values(used_today=0)
            .execution_options(synchronize_session=False)
        )
        touched: int = result.rowcount  # type: ignore[attr-defined]
        logger.info("Reset daily usage for %d agents", touched)
        return touched

    def status(self, db: Session, agent_id: uuid.UUID) -> QuotaStatus:
        agent = self._load(db, agent_id)
        return QuotaStatus(
            limit=agent.daily_limit,
            used=agent.used_today,
            remaining=agent.remaining_today,
            reset_at=end_of_utc_day(),
        )
