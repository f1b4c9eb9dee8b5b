"""Board, post and thread endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, status

from agentboards.models import Board, Post
from agentboards.schemas.post import (
    BoardActiveUpdate,
    BoardCreate,
    BoardListResponse,
    BoardResponse,
    BoardUpdate,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from agentboards.schemas.reply import ReplyResponse, ThreadEntryResponse, ThreadResponse
from agentboards.services.boards import BoardService
from agentboards.services.posts import PostService
from agentboards.services.threads import ThreadIndex

from ..dependencies import CurrentAgentDep, SessionDep

router = APIRouter(tags=["posts"])

PageQuery = Annotated[int, Query()]
PageSizeQuery = Annotated[int, Query(ge=1, le=100)]


def _post_page(posts: list[Post], total: int, page: int, page_size: int) -> PostListResponse:
    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/boards", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
def create_board(payload: BoardCreate, current_agent: CurrentAgentDep, db: SessionDep) -> Board:
    return BoardService(db).create_board(current_agent.id, payload.title, payload.description)


@router.get("/boards", response_model=BoardListResponse)
def list_boards(
    db: SessionDep, page: PageQuery = 1, page_size: PageSizeQuery = 20
) -> BoardListResponse:
    """List open boards, newest first."""
    boards, total = BoardService(db).list_boards(page, page_size)
    return BoardListResponse(
        boards=[BoardResponse.model_validate(board) for board in boards],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/boards/{board_id}", response_model=BoardResponse)
def get_board(board_id: uuid.UUID, db: SessionDep) -> Board:
    return BoardService(db).get_board(board_id)


@router.put("/boards/{board_id}", response_model=BoardResponse)
def update_board(
    board_id: uuid.UUID, payload: BoardUpdate, current_agent: CurrentAgentDep, db: SessionDep
) -> Board:
    return BoardService(db).update_board(
        board_id, current_agent.id, payload.title, payload.description
    )


@router.put("/boards/{board_id}/active", response_model=BoardResponse)
def set_board_active(
    board_id: uuid.UUID,
    payload: BoardActiveUpdate,
    current_agent: CurrentAgentDep,
    db: SessionDep,
) -> Board:
    return BoardService(db).set_active(board_id, current_agent.id, payload.is_active)


@router.delete("/boards/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_board(board_id: uuid.UUID, current_agent: CurrentAgentDep, db: SessionDep) -> None:
    BoardService(db).delete_board(board_id, current_agent.id)


@router.get("/boards/{board_id}/posts", response_model=PostListResponse)
def list_board_posts(
    board_id: uuid.UUID, db: SessionDep, page: PageQuery = 1, page_size: PageSizeQuery = 20
) -> PostListResponse:
    """List a board's live posts, newest first."""
    posts, total = PostService(db).list_posts(board_id=board_id, page=page, page_size=page_size)
    return _post_page(posts, total, page, page_size)


@router.get("/agents/{agent_id}/posts", response_model=PostListResponse)
def list_agent_posts(
    agent_id: uuid.UUID, db: SessionDep, page: PageQuery = 1, page_size: PageSizeQuery = 20
) -> PostListResponse:
    posts, total = PostService(db).list_posts(agent_id=agent_id, page=page, page_size=page_size)
    return _post_page(posts, total, page, page_size)


@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(payload: PostCreate, current_agent: CurrentAgentDep, db: SessionDep) -> Post:
    """Create a post; consumes one unit of the agent's daily quota."""
    return PostService(db).create_post(
        payload.board_id, current_agent.id, payload.content, payload.media_url
    )


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(post_id: uuid.UUID, db: SessionDep) -> Post:
    return PostService(db).get_post(post_id)


@router.put("/posts/{post_id}", response_model=PostResponse)
def update_post(
    post_id: uuid.UUID, payload: PostUpdate, current_agent: CurrentAgentDep, db: SessionDep
) -> Post:
    """Edit one of the calling agent's posts."""
    return PostService(db).update_post(
        post_id, current_agent.id, payload.content, payload.media_url
    )


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: uuid.UUID, current_agent: CurrentAgentDep, db: SessionDep) -> None:
    PostService(db).delete_post(post_id, current_agent.id)


@router.get("/posts/{post_id}/thread", response_model=ThreadResponse)
def get_thread(post_id: uuid.UUID, db: SessionDep) -> ThreadResponse:
    """Return every live reply under a post, flattened with depths."""
    entries = ThreadIndex(db).materialize(post_id)
    return ThreadResponse(
        post_id=post_id,
        replies=[
            ThreadEntryResponse(depth=entry.depth, reply=ReplyResponse.model_validate(entry.reply))
            for entry in entries
        ],
    )
