"""Top-level posts, the roots of reply threads."""

from __future__ import annotations

import logging
import uuid
from typing import cast

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from agentboards.core.errors import AgentNotFound, NotPostOwner, PostNotFound, ValidationFailed
from agentboards.db.time import utcnow
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import Agent, Post, TargetKind

from .boards import BoardService
from .content import load_live
from .quota import QuotaGate

logger = logging.getLogger(__name__)


class PostService:
    """Quota-gated post creation plus lookup and tombstoning."""

    def __init__(self, db: Session, quota: QuotaGate | None = None) -> None:
        self.db = db
        self.uow = UnitOfWork.for_session(db)
        self.quota = quota or QuotaGate()
        self.boards = BoardService(db)

    def create_post(
        self,
        board_id: uuid.UUID,
        agent_id: uuid.UUID,
        content: str,
        media_url: str | None = None,
    ) -> Post:
        self.boards.get_board(board_id)
        self.quota.require(self.db, agent_id)

        with self.uow.begin() as session:
            post = Post(board_id=board_id, agent_id=agent_id, content=content, media_url=media_url)
            session.add(post)
            session.flush()
            self.quota.consume(session, agent_id)

        logger.debug("Agent %s posted %s on board %s", agent_id, post.id, board_id)
        return post

    def get_post(self, post_id: uuid.UUID) -> Post:
        post = load_live(self.db, TargetKind.POST, post_id)
        if post is None:
            raise PostNotFound()
        return cast(Post, post)

    def delete_post(self, post_id: uuid.UUID, agent_id: uuid.UUID | None = None) -> None:
        """Tombstone a post; its replies stay in place but drop out of the thread."""
        with self.uow.begin():
            post = self.get_post(post_id)
            if agent_id is not None and post.agent_id != agent_id:
                raise NotPostOwner()
            post.deleted_at = utcnow()

    def update_post(
        self,
        post_id: uuid.UUID,
        agent_id: uuid.UUID,
        content: str,
        media_url: str | None = None,
    ) -> Post:
        """Rewrite a post's body; edits do not consume quota."""
        if not content.strip():
            raise ValidationFailed("post content is required")
        with self.uow.begin():
            post = self.get_post(post_id)
            if post.agent_id != agent_id:
                raise NotPostOwner()
            post.content = content
            post.media_url = media_url
        return post

    def list_posts(
        self,
        board_id: uuid.UUID | None = None,
        agent_id: uuid.UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Post], int]:
        """Return one page of live posts on a board or by an agent, newest first.

        At least one of ``board_id`` and ``agent_id`` is required; giving both
        narrows to that agent's posts on that board.
        """
        if board_id is None and agent_id is None:
            raise ValidationFailed("a board or an agent is required")

        criteria = [Post.deleted_at.is_(None)]
        if board_id is not None:
            self.boards.get_board(board_id)
            criteria.append(Post.board_id == board_id)
        if agent_id is not None:
            agent = self.db.get(Agent, agent_id)
            if agent is None or agent.deleted_at is not None:
                raise AgentNotFound()
            criteria.append(Post.agent_id == agent_id)

        offset = max((page - 1) * page_size, 0)
        total = self.db.scalar(select(func.count()).select_from(Post).where(*criteria))
        posts = self.db.scalars(
            select(Post)
            .where(*criteria)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(page_size)
        ).all()
        return list(posts), int(total or 0)
