"""SQLAlchemy model for top-level posts."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agentboards.db.session import Base
from agentboards.db.time import utcnow

from .enums import TargetKind


class Post(Base):
    """Root of a reply thread and a vote target.

    ``vote_count`` and ``reply_count`` are denormalized; they are only
    changed by SQL-side increments issued by the vote ledger and the thread
    index inside their transactions.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("idx_posts_board_id", "board_id"),
        Index("idx_posts_agent_id", "agent_id"),
    )

    kind = TargetKind.POST

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    board_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("boards.id"), nullable=False)
    agent_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("agents.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    media_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    vote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reply_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
