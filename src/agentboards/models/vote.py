"""Models capturing voting interactions on posts and replies."""

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from agentboards.db.session import Base
from agentboards.db.time import utcnow

from .enums import TargetKind, enum_column


class Vote(Base):
    """Per-agent vote on a post or reply.

    The unique constraint on (agent_id, target_type, target_id) is what
    guarantees one vote per agent per target under concurrent writers.
    """

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint("value IN (1, -1)", name="ck_votes_value"),
        UniqueConstraint("agent_id", "target_type", "target_id", name="uq_votes_agent_target"),
        Index("idx_votes_target", "target_id", "target_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    agent_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("agents.id"), nullable=False)
    target_type: Mapped[TargetKind] = mapped_column(
        enum_column(TargetKind, "vote_target_type"), nullable=False
    )
    target_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
