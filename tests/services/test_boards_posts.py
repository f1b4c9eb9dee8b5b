# tests/services/test_boards_posts.py
"""Tests for board management and post listing."""

import uuid
from datetime import timedelta

import pytest

from agentboards.core.errors import (
    AgentNotFound,
    BoardNotFound,
    NotBoardOwner,
    NotPostOwner,
    PostNotFound,
    ValidationFailed,
)
from agentboards.db.time import utcnow
from agentboards.services.boards import BoardService
from agentboards.services.posts import PostService
from agentboards.services.quota import QuotaGate


def _backdate(db_session, rows, start):
    """Give rows strictly increasing creation times, oldest first."""
    for offset, row in enumerate(rows):
        row.created_at = start + timedelta(minutes=offset)
    db_session.commit()


class TestBoards:
    def test_list_boards_newest_first(self, db_session, agent, other_agent):
        service = BoardService(db_session)
        boards = [
            service.create_board(agent.id, "first"),
            service.create_board(other_agent.id, "second"),
            service.create_board(agent.id, "third"),
        ]
        _backdate(db_session, boards, utcnow() - timedelta(hours=1))

        page, total = service.list_boards(page=1, page_size=2)
        rest, _ = service.list_boards(page=2, page_size=2)

        assert total == 3
        assert [b.title for b in page] == ["third", "second"]
        assert [b.title for b in rest] == ["first"]

    def test_closed_and_deleted_boards_are_hidden(self, db_session, agent, board):
        service = BoardService(db_session)
        closed = service.create_board(agent.id, "closed")
        service.set_active(closed.id, agent.id, False)
        service.delete_board(board.id, agent.id)

        boards, total = service.list_boards()

        assert (boards, total) == ([], 0)
        with pytest.raises(BoardNotFound):
            service.get_board(closed.id)
        with pytest.raises(BoardNotFound):
            service.get_board(board.id)

    def test_closed_board_takes_no_posts_until_reopened(self, db_session, agent, board):
        service = BoardService(db_session)
        service.set_active(board.id, agent.id, False)

        with pytest.raises(BoardNotFound):
            PostService(db_session).create_post(board.id, agent.id, "too late")

        service.set_active(board.id, agent.id, True)
        post = PostService(db_session).create_post(board.id, agent.id, "open again")
        assert post.board_id == board.id

    def test_update_board(self, db_session, agent, board):
        updated = BoardService(db_session).update_board(board.id, agent.id, " Renamed ", "new")

        assert updated.title == "Renamed"
        assert updated.description == "new"

    def test_only_owner_manages_board(self, db_session, other_agent, board):
        service = BoardService(db_session)
        with pytest.raises(NotBoardOwner):
            service.update_board(board.id, other_agent.id, "mine now")
        with pytest.raises(NotBoardOwner):
            service.set_active(board.id, other_agent.id, False)
        with pytest.raises(NotBoardOwner):
            service.delete_board(board.id, other_agent.id)

        assert service.get_board(board.id).title == "General"

    def test_update_requires_title(self, db_session, agent, board):
        with pytest.raises(ValidationFailed):
            BoardService(db_session).update_board(board.id, agent.id, "  ")


class TestListPosts:
    def test_board_posts_newest_first_without_tombstones(self, db_session, agent, board):
        service = PostService(db_session)
        posts = [service.create_post(board.id, agent.id, f"post {n}") for n in range(4)]
        _backdate(db_session, posts, utcnow() - timedelta(hours=1))
        service.delete_post(posts[1].id, agent.id)

        listed, total = service.list_posts(board_id=board.id)

        assert total == 3
        assert [p.content for p in listed] == ["post 3", "post 2", "post 0"]

    def test_posts_by_agent_across_boards(self, db_session, agent, other_agent, board):
        service = PostService(db_session)
        elsewhere = BoardService(db_session).create_board(other_agent.id, "Elsewhere")
        mine = [
            service.create_post(board.id, agent.id, "here"),
            service.create_post(elsewhere.id, agent.id, "there"),
        ]
        service.create_post(elsewhere.id, other_agent.id, "not mine")
        _backdate(db_session, mine, utcnow() - timedelta(hours=1))

        listed, total = service.list_posts(agent_id=agent.id)
        narrowed, narrowed_total = service.list_posts(board_id=elsewhere.id, agent_id=agent.id)

        assert total == 2
        assert [p.content for p in listed] == ["there", "here"]
        assert narrowed_total == 1
        assert [p.content for p in narrowed] == ["there"]

    def test_pagination(self, db_session, agent, board):
        service = PostService(db_session)
        for n in range(5):
            service.create_post(board.id, agent.id, f"post {n}")

        page, total = service.list_posts(board_id=board.id, page=3, page_size=2)

        assert total == 5
        assert len(page) == 1

    def test_requires_board_or_agent(self, db_session):
        with pytest.raises(ValidationFailed):
            PostService(db_session).list_posts()

    def test_unknown_board_or_agent(self, db_session):
        service = PostService(db_session)
        with pytest.raises(BoardNotFound):
            service.list_posts(board_id=uuid.uuid4())
        with pytest.raises(AgentNotFound):
            service.list_posts(agent_id=uuid.uuid4())


class TestUpdatePost:
    def test_owner_edits_without_spending_quota(self, db_session, agent, post):
        used = QuotaGate().status(db_session, agent.id).used

        updated = PostService(db_session).update_post(
            post.id, agent.id, "Edited", "https://example.com/a.png"
        )

        assert updated.content == "Edited"
        assert updated.media_url == "https://example.com/a.png"
        assert QuotaGate().status(db_session, agent.id).used == used

    def test_other_agent_cannot_edit(self, db_session, other_agent, post):
        with pytest.raises(NotPostOwner):
            PostService(db_session).update_post(post.id, other_agent.id, "Hijacked")

        assert PostService(db_session).get_post(post.id).content == "Hello, boards"

    def test_tombstoned_post_cannot_be_edited(self, db_session, agent, post):
        service = PostService(db_session)
        service.delete_post(post.id, agent.id)

        with pytest.raises(PostNotFound):
            service.update_post(post.id, agent.id, "Too late")

    def test_blank_content(self, db_session, agent, post):
        with pytest.raises(ValidationFailed):
            PostService(db_session).update_post(post.id, agent.id, "   ")
