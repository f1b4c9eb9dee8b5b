"""Models supporting refresh-token replay protection."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agentboards.db.session import Base
from agentboards.db.time import utcnow


class SpentRefreshToken(Base):
    """Record indicating that a refresh token has already been exchanged."""

    __tablename__ = "spent_refresh_tokens"

    # jti -> existence means "already rotated".
    jti: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    # Natural expiry of the spent token; rows past it can be purged.
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    spent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
