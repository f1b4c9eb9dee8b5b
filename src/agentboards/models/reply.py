"""SQLAlchemy model for replies, which are both vote targets and thread nodes."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agentboards.db.session import Base
from agentboards.db.time import utcnow

from .enums import TargetKind, enum_column


class Reply(Base):
    """Reply attached to a post or to another reply.

    The parent is addressed by ``(parent_type, parent_id)``; the pair is not
    a foreign key because it is polymorphic, so the thread index validates it
    before inserting.
    """

    __tablename__ = "replies"
    __table_args__ = (
        Index("idx_replies_parent", "parent_type", "parent_id"),
        Index("idx_replies_agent_id", "agent_id"),
    )

    kind = TargetKind.REPLY

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_type: Mapped[TargetKind] = mapped_column(
        enum_column(TargetKind, "reply_parent_type"), nullable=False
    )
    parent_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
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

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
