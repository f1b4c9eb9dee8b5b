"""Boards group posts by topic."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from agentboards.core.errors import AgentNotFound, BoardNotFound, NotBoardOwner, ValidationFailed
from agentboards.db.time import utcnow
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import Agent, Board

logger = logging.getLogger(__name__)


class BoardService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.uow = UnitOfWork.for_session(db)

    def create_board(self, agent_id: uuid.UUID, title: str, description: str = "") -> Board:
        title = title.strip()
        if not title:
            raise ValidationFailed("board title is required")
        agent = self.db.get(Agent, agent_id)
        if agent is None or agent.deleted_at is not None:
            raise AgentNotFound()

        with self.uow.begin() as session:
            board = Board(agent_id=agent_id, title=title, description=description)
            session.add(board)
        return board

    def get_board(self, board_id: uuid.UUID) -> Board:
        """Return a live, active board."""
        board = self._load_live(board_id)
        if not board.is_active:
            raise BoardNotFound()
        return board

    def list_boards(self, page: int = 1, page_size: int = 20) -> tuple[list[Board], int]:
        """Return one page of live, active boards, newest first, and their total."""
        criteria = (Board.deleted_at.is_(None), Board.is_active.is_(True))
        offset = max((page - 1) * page_size, 0)
        total = self.db.scalar(select(func.count()).select_from(Board).where(*criteria))
        boards = self.db.scalars(
            select(Board)
            .where(*criteria)
            .order_by(Board.created_at.desc(), Board.id.desc())
            .offset(offset)
            .limit(page_size)
        ).all()
        return list(boards), int(total or 0)

    def update_board(
        self,
        board_id: uuid.UUID,
        agent_id: uuid.UUID,
        title: str,
        description: str = "",
    ) -> Board:
        title = title.strip()
        if not title:
            raise ValidationFailed("board title is required")
        with self.uow.begin():
            board = self._owned(board_id, agent_id)
            board.title = title
            board.description = description
        return board

    def set_active(self, board_id: uuid.UUID, agent_id: uuid.UUID, is_active: bool) -> Board:
        """Open or close a board; closed boards take no posts and are hidden."""
        with self.uow.begin():
            board = self._owned(board_id, agent_id)
            board.is_active = is_active
        logger.info("Board %s active=%s", board_id, is_active)
        return board

    def delete_board(self, board_id: uuid.UUID, agent_id: uuid.UUID | None = None) -> None:
        with self.uow.begin():
            board = self._owned(board_id, agent_id)
            board.deleted_at = utcnow()
        logger.info("Deleted board %s", board_id)

    def _load_live(self, board_id: uuid.UUID) -> Board:
        board = self.db.get(Board, board_id)
        if board is None or board.deleted_at is not None:
            raise BoardNotFound()
        return board

    def _owned(self, board_id: uuid.UUID, agent_id: uuid.UUID | None) -> Board:
        board = self._load_live(board_id)
        if agent_id is not None and board.agent_id != agent_id:
            raise NotBoardOwner()
        return board
