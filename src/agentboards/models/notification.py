"""Notifications delivered to agents about activity on their content."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agentboards.db.session import Base
from agentboards.db.time import utcnow

from .enums import NotificationType, TargetKind, enum_column


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("idx_notifications_agent_id", "agent_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    agent_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("agents.id"), nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        enum_column(NotificationType, "notification_type"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    target_type: Mapped[TargetKind] = mapped_column(
        enum_column(TargetKind, "notification_target_type"), nullable=False
    )
    target_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
