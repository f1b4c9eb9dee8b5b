"""Reply trees hanging off posts.

Replies address their parent polymorphically as ``(parent_type, parent_id)``.
:class:`ThreadIndex` validates parents on insert, keeps the parent's
``reply_count`` in step with its live children, and flattens a whole thread
into a depth-annotated list for display.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Literal

from sqlalchemy import and_, func, literal, select
from sqlalchemy.orm import Session, aliased

from agentboards.core.errors import (
    InvalidParent,
    InvalidTarget,
    NotReplyOwner,
    ParentNotFound,
    PostNotFound,
    ReplyNotFound,
)
from agentboards.db.time import utcnow
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import Reply, TargetKind

from .content import decrement_reply_count, increment_reply_count, load_live
from .notifications import NotificationDispatcher
from .quota import QuotaGate

logger = logging.getLogger(__name__)

Strategy = Literal["auto", "cte", "bfs"]

_RECURSIVE_CTE_DIALECTS = frozenset({"postgresql", "sqlite", "mysql", "mariadb", "mssql", "oracle"})


@dataclass(frozen=True)
class ThreadEntry:
    reply: Reply
    depth: int


class ThreadIndex:
    """Create, edit, tombstone and materialize replies."""

    def __init__(
        self,
        db: Session,
        quota: QuotaGate | None = None,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        self.db = db
        self.uow = UnitOfWork.for_session(db)
        self.quota = quota or QuotaGate()
        self.notifier = notifier or NotificationDispatcher(db)

    # --- Writes ---------------------------------------------------------------------
    def create_node(
        self,
        parent_kind: TargetKind | str,
        parent_id: uuid.UUID,
        author_id: uuid.UUID,
        content: str,
        media_url: str | None = None,
    ) -> Reply:
        """Attach a reply to a post or live reply and charge the author's quota.

        The parent check and the quota pre-check both happen before anything
        is written. The insert, the parent counter bump and the quota consume
        then commit or roll back together.
        """
        try:
            kind = TargetKind.parse(parent_kind)
        except InvalidTarget as err:
            raise InvalidParent() from err

        parent = load_live(self.db, kind, parent_id)
        if parent is None:
            raise ParentNotFound()
        parent_author_id = parent.agent_id

        self.quota.require(self.db, author_id)

        with self.uow.begin() as session:
            reply = Reply(
                parent_type=kind,
                parent_id=parent_id,
                agent_id=author_id,
                content=content,
                media_url=media_url,
            )
            session.add(reply)
            session.flush()
            increment_reply_count(session, kind, parent_id)
            self.quota.consume(session, author_id)

        logger.debug("Agent %s replied to %s %s", author_id, kind.value, parent_id)
        self.notifier.notify_reply(reply, parent_author_id)
        return reply

    def update_node(
        self,
        reply_id: uuid.UUID,
        author_id: uuid.UUID,
        content: str,
        media_url: str | None = None,
    ) -> Reply:
        with self.uow.begin() as session:
            reply = self._load_live(session, reply_id)
            if reply.agent_id != author_id:
                raise NotReplyOwner()
            reply.content = content
            reply.media_url = media_url
        return reply

    def delete_node(self, reply_id: uuid.UUID, agent_id: uuid.UUID | None = None) -> None:
        """Tombstone a reply and decrement its parent's ``reply_count``.

        Descendants are left in place; they simply become unreachable from the
        root while their ancestor is tombstoned.
        """
        with self.uow.begin() as session:
            reply = self._load_live(session, reply_id, for_update=True)
            if agent_id is not None and reply.agent_id != agent_id:
                raise NotReplyOwner()
            reply.deleted_at = utcnow()
            session.flush()
            decrement_reply_count(session, reply.parent_type, reply.parent_id)

        logger.debug("Tombstoned reply %s", reply_id)

    # --- Reads ----------------------------------------------------------------------
    def get(self, reply_id: uuid.UUID) -> Reply:
        return self._load_live(self.db, reply_id)

    def children(
        self,
        parent_kind: TargetKind | str,
        parent_id: uuid.UUID,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Reply], int]:
        """Return one page of direct live replies, oldest first, and their total."""
        try:
            kind = TargetKind.parse(parent_kind)
        except InvalidTarget as err:
            raise InvalidParent() from err

        criteria = (
            Reply.parent_type == kind,
            Reply.parent_id == parent_id,
            Reply.deleted_at.is_(None),
        )
        offset = max((page - 1) * page_size, 0)
        total = self.db.scalar(select(func.count()).select_from(Reply).where(*criteria))
        rows = self.db.scalars(
            select(Reply)
            .where(*criteria)
            .order_by(Reply.created_at.asc(), Reply.id.asc())
            .offset(offset)
            .limit(page_size)
        ).all()
        return list(rows), int(total or 0)

    def materialize(
        self, root_post_id: uuid.UUID, strategy: Strategy = "auto"
    ) -> list[ThreadEntry]:
        """Flatten every live reply under a post, ordered by (depth, created_at, id).

        Direct replies to the post have depth 0. A tombstoned reply and
        everything beneath it are excluded.
        """
        if load_live(self.db, TargetKind.POST, root_post_id) is None:
            raise PostNotFound()

        if strategy == "auto":
            dialect = self.db.get_bind().dialect.name
            strategy = "cte" if dialect in _RECURSIVE_CTE_DIALECTS else "bfs"
        if strategy == "cte":
            return self._materialize_cte(root_post_id)
        if strategy == "bfs":
            return self._materialize_bfs(root_post_id)
        raise ValueError(f"unknown materialize strategy: {strategy!r}")

    def _materialize_cte(self, root_post_id: uuid.UUID) -> list[ThreadEntry]:
        anchor = select(Reply.id.label("id"), literal(0).label("depth")).where(
            Reply.parent_type == TargetKind.POST,
            Reply.parent_id == root_post_id,
            Reply.deleted_at.is_(None),
        )
        tree = anchor.cte("thread", recursive=True)
        child = aliased(Reply)
        tree = tree.union_all(
            select(child.id, (tree.c.depth + 1).label("depth")).join(
                tree,
                and_(child.parent_type == TargetKind.REPLY, child.parent_id == tree.c.id),
            ).where(child.deleted_at.is_(None))
        )

        rows = self.db.execute(
            select(Reply, tree.c.depth)
            .join(tree, Reply.id == tree.c.id)
            .order_by(tree.c.depth.asc(), Reply.created_at.asc(), Reply.id.asc())
        ).all()
        return [ThreadEntry(reply=reply, depth=int(depth)) for reply, depth in rows]

    def _materialize_bfs(self, root_post_id: uuid.UUID) -> list[ThreadEntry]:
        entries: list[ThreadEntry] = []
        seen: set[uuid.UUID] = set()

        level = self._live_children(TargetKind.POST, [root_post_id])
        depth = 0
        while level:
            level = [reply for reply in level if reply.id not in seen]
            seen.update(reply.id for reply in level)
            entries.extend(ThreadEntry(reply=reply, depth=depth) for reply in level)
            level = self._live_children(TargetKind.REPLY, [reply.id for reply in level])
            depth += 1
        return entries

    def _live_children(self, kind: TargetKind, parent_ids: list[uuid.UUID]) -> list[Reply]:
        if not parent_ids:
            return []
        by_parent: dict[uuid.UUID, list[Reply]] = {}
        for reply in self.db.scalars(
            select(Reply).where(
                Reply.parent_type == kind,
                Reply.parent_id.in_(parent_ids),
                Reply.deleted_at.is_(None),
            )
        ):
            by_parent.setdefault(reply.parent_id, []).append(reply)
        level = [reply for replies in by_parent.values() for reply in replies]
        level.sort(key=lambda reply: (reply.created_at, reply.id))
        return level

    @staticmethod
    def _load_live(db: Session, reply_id: uuid.UUID, *, for_update: bool = False) -> Reply:
        stmt = select(Reply).where(Reply.id == reply_id, Reply.deleted_at.is_(None))
        if for_update:
            stmt = stmt.with_for_update()
        reply = db.scalar(stmt)
        if reply is None:
            raise ReplyNotFound()
        return reply

