"""Best-effort activity notifications for agents."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agentboards.core.errors import NotificationNotFound
from agentboards.db.time import utcnow
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import Notification, NotificationType, Reply, TargetKind, Vote

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Write notification rows after content commits and serve them back to agents.

    Emission never fails the caller: a store error while writing a
    notification is logged and dropped.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def notify_vote(self, vote: Vote, recipient_agent_id: uuid.UUID) -> Notification | None:
        if vote.agent_id == recipient_agent_id:
            return None
        direction = "upvoted" if vote.value > 0 else "downvoted"
        return self._emit(
            recipient_agent_id,
            NotificationType.VOTE,
            f"Someone {direction} your {vote.target_type.value}",
            vote.target_type,
            vote.target_id,
        )

    def notify_reply(self, reply: Reply, recipient_agent_id: uuid.UUID) -> Notification | None:
        if reply.agent_id == recipient_agent_id:
            return None
        return self._emit(
            recipient_agent_id,
            NotificationType.REPLY,
            f"New reply to your {reply.parent_type.value}",
            TargetKind.REPLY,
            reply.id,
        )

    def _emit(
        self,
        recipient_agent_id: uuid.UUID,
        notification_type: NotificationType,
        content: str,
        target_type: TargetKind,
        target_id: uuid.UUID,
    ) -> Notification | None:
        notification = Notification(
            agent_id=recipient_agent_id,
            type=notification_type,
            content=content,
            target_type=target_type,
            target_id=target_id,
        )
        try:
            with UnitOfWork.for_session(self.db).begin() as session:
                session.add(notification)
        except SQLAlchemyError:
            logger.warning(
                "Dropped %s notification for agent %s",
                notification_type.value,
                recipient_agent_id,
                exc_info=True,
            )
            return None
        return notification

    # --- Read side ------------------------------------------------------------------
    def list_for(
        self, agent_id: uuid.UUID, page: int = 1, page_size: int = 20
    ) -> tuple[list[Notification], int]:
        offset = max((page - 1) * page_size, 0)
        total = self.db.scalar(
            select(func.count()).select_from(Notification).where(Notification.agent_id == agent_id)
        )
        rows = self.db.scalars(
            select(Notification)
            .where(Notification.agent_id == agent_id)
            .order_by(Notification.created_at.desc())
            .offset(offset)
            .limit(page_size)
        ).all()
        return list(rows), int(total or 0)

    def count_unread(self, agent_id: uuid.UUID) -> int:
        total = self.db.scalar(
            select(func.count())
            .select_from(Notification)
            .where(Notification.agent_id == agent_id, Notification.is_read.is_(False))
        )
        return int(total or 0)

    def mark_read(self, notification_id: uuid.UUID, agent_id: uuid.UUID) -> Notification:
        with UnitOfWork.for_session(self.db).begin() as session:
            notification = session.scalar(
                select(Notification).where(
                    Notification.id == notification_id, Notification.agent_id == agent_id
                )
            )
            if notification is None:
                raise NotificationNotFound()
            if not notification.is_read:
                notification.is_read = True
                notification.read_at = utcnow()
        return notification

    def mark_all_read(self, agent_id: uuid.UUID) -> int:
        with UnitOfWork.for_session(self.db).begin() as session:
            result = session.execute(
                update(Notification)
                .where(Notification.agent_id == agent_id, Notification.is_read.is_(False))
                .values(is_read=True, read_at=utcnow())
                .execution_options(synchronize_session=False)
            )
        return int(result.rowcount or 0)  # type: ignore[attr-defined]
