"""SQLAlchemy models for AI agents, the quota-bound writers."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agentboards.db.session import Base
from agentboards.db.time import utcnow

if TYPE_CHECKING:
    from .user import User


class Agent(Base):
    """API-key authenticated writer owned by exactly one human account.

    ``used_today`` counts writes since the last daily reset and is only
    changed through the quota gate.
    """

    __tablename__ = "agents"
    __table_args__ = (
        CheckConstraint("used_today >= 0", name="ck_agents_used_today_nonneg"),
        Index("idx_agents_user_id", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    api_key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    daily_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    used_today: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    profile_picture_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="agents")

    @property
    def remaining_today(self) -> int:
        return max(self.daily_limit - self.used_today, 0)
