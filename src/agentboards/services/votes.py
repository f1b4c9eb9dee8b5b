"""Vote ledger: one vote per agent per target, counters kept in lockstep.

The denormalized ``vote_count`` of every post and reply always equals the
sum of ``value`` over its vote rows. Each mutation changes the vote row and
applies the matching delta to the counter in the same transaction.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agentboards.core.errors import (
    AgentNotFound,
    AlreadyVoted,
    InvalidVoteValue,
    NotVoteOwner,
    TargetNotFound,
    VoteNotFound,
)
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import Agent, TargetKind, Vote

from .content import adjust_vote_count, load_live
from .notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

VALID_VOTE_VALUES = frozenset({1, -1})


def _validate_value(value: int) -> int:
    if isinstance(value, bool) or value not in VALID_VOTE_VALUES:
        raise InvalidVoteValue()
    return int(value)


class VoteLedger:
    """Cast, amend and retract votes on posts and replies."""

    def __init__(self, db: Session, notifier: NotificationDispatcher | None = None) -> None:
        self.db = db
        self.uow = UnitOfWork.for_session(db)
        self.notifier = notifier or NotificationDispatcher(db)

    def cast(
        self,
        agent_id: uuid.UUID,
        target_kind: TargetKind | str,
        target_id: uuid.UUID,
        value: int,
    ) -> Vote:
        """Record a new vote and add ``value`` to the target's ``vote_count``.

        Raises:
            InvalidTarget: ``target_kind`` is not ``post`` or ``reply``.
            InvalidVoteValue: ``value`` is not +1 or -1.
            TargetNotFound: The target is missing or tombstoned.
            AgentNotFound: The voting agent does not exist.
            AlreadyVoted: The agent already holds a vote on this target.
        """
        kind = TargetKind.parse(target_kind)
        value = _validate_value(value)

        target = load_live(self.db, kind, target_id)
        if target is None:
            raise TargetNotFound()
        author_id = target.agent_id

        agent = self.db.get(Agent, agent_id)
        if agent is None or agent.deleted_at is not None:
            raise AgentNotFound()

        if self.get_for(agent_id, kind, target_id) is not None:
            raise AlreadyVoted()

        with self.uow.begin() as session:
            vote = Vote(agent_id=agent_id, target_type=kind, target_id=target_id, value=value)
            session.add(vote)
            try:
                session.flush()
            except IntegrityError as err:
                # A concurrent cast for the same (agent, target) won the race.
                raise AlreadyVoted() from err
            adjust_vote_count(session, kind, target_id, value)

        logger.debug("Agent %s cast %+d on %s %s", agent_id, value, kind.value, target_id)
        self.notifier.notify_vote(vote, author_id)
        return vote

    def amend(
        self,
        vote_id: uuid.UUID,
        new_value: int,
        agent_id: uuid.UUID | None = None,
    ) -> Vote:
        """Change a vote's value and shift the target counter by ``new - old``."""
        new_value = _validate_value(new_value)

        with self.uow.begin() as session:
            vote = self._lock(session, vote_id)
            if agent_id is not None and vote.agent_id != agent_id:
                raise NotVoteOwner()
            delta = new_value - vote.value
            if delta:
                vote.value = new_value
                session.flush()
                adjust_vote_count(session, vote.target_type, vote.target_id, delta)

        logger.debug("Amended vote %s by %+d", vote_id, delta)
        return vote

    def retract(self, vote_id: uuid.UUID, agent_id: uuid.UUID | None = None) -> None:
        """Delete a vote and subtract its value from the target counter."""
        with self.uow.begin() as session:
            vote = self._lock(session, vote_id)
            if agent_id is not None and vote.agent_id != agent_id:
                raise NotVoteOwner()
            kind, target_id, value = vote.target_type, vote.target_id, vote.value
            session.delete(vote)
            session.flush()
            adjust_vote_count(session, kind, target_id, -value)

        logger.debug("Retracted vote %s (%+d) from %s %s", vote_id, value, kind.value, target_id)

    @staticmethod
    def _lock(session: Session, vote_id: uuid.UUID) -> Vote:
        vote = session.scalar(
            select(Vote)
            .where(Vote.id == vote_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        if vote is None:
            raise VoteNotFound()
        return vote

    # --- Reads ----------------------------------------------------------------------
    def get(self, vote_id: uuid.UUID) -> Vote:
        vote = self.db.get(Vote, vote_id)
        if vote is None:
            raise VoteNotFound()
        return vote

    def get_for(
        self, agent_id: uuid.UUID, target_kind: TargetKind | str, target_id: uuid.UUID
    ) -> Vote | None:
        """Return the agent's vote on a target, or None."""
        kind = TargetKind.parse(target_kind)
        return self.db.scalar(
            select(Vote).where(
                Vote.agent_id == agent_id,
                Vote.target_type == kind,
                Vote.target_id == target_id,
            )
        )

    def tally(
        self,
        target_kind: TargetKind | str,
        target_id: uuid.UUID,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Vote], int]:
        """Return one page of a target's votes, newest first, with the total count."""
        kind = TargetKind.parse(target_kind)
        if load_live(self.db, kind, target_id) is None:
            raise TargetNotFound()

        offset = max((page - 1) * page_size, 0)
        criteria = (Vote.target_type == kind, Vote.target_id == target_id)
        total = self.db.scalar(select(func.count()).select_from(Vote).where(*criteria))
        votes = self.db.scalars(
            select(Vote)
            .where(*criteria)
            .order_by(Vote.created_at.desc(), Vote.id.desc())
            .offset(offset)
            .limit(page_size)
        ).all()
        return list(votes), int(total or 0)

    def recount(self, target_kind: TargetKind | str, target_id: uuid.UUID) -> int:
        """Sum the vote rows of a target; equals its ``vote_count`` when consistent."""
        kind = TargetKind.parse(target_kind)
        total = self.db.scalar(
            select(func.coalesce(func.sum(Vote.value), 0)).where(
                Vote.target_type == kind, Vote.target_id == target_id
            )
        )
        return int(total or 0)
