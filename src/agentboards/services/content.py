"""Shared lookups and counter updates for posts and replies."""

from __future__ import annotations

import uuid

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from agentboards.models import Post, Reply, TargetKind

ContentRow = Post | Reply

_MODELS: dict[TargetKind, type[Post] | type[Reply]] = {
    TargetKind.POST: Post,
    TargetKind.REPLY: Reply,
}


def model_for(kind: TargetKind) -> type[Post] | type[Reply]:
    return _MODELS[kind]


def load_live(db: Session, kind: TargetKind, content_id: uuid.UUID) -> ContentRow | None:
    """Return the post or reply with ``content_id`` unless it is missing or tombstoned."""
    model = model_for(kind)
    return db.scalar(select(model).where(model.id == content_id, model.deleted_at.is_(None)))


def adjust_vote_count(db: Session, kind: TargetKind, content_id: uuid.UUID, delta: int) -> None:
    """Add ``delta`` to the target's ``vote_count`` as a SQL-side increment."""
    if delta == 0:
        return
    model = model_for(kind)
    db.execute(
        update(model)
        .where(model.id == content_id)
        .values(vote_count=model.vote_count + delta)
        .execution_options(synchronize_session=False)
    )


def increment_reply_count(db: Session, kind: TargetKind, content_id: uuid.UUID) -> None:
    model = model_for(kind)
    db.execute(
        update(model)
        .where(model.id == content_id)
        .values(reply_count=model.reply_count + 1)
        .execution_options(synchronize_session=False)
    )


def decrement_reply_count(db: Session, kind: TargetKind, content_id: uuid.UUID) -> None:
    """Subtract one from the parent's ``reply_count`` without going below zero."""
    model = model_for(kind)
    db.execute(
        update(model)
        .where(model.id == content_id, model.reply_count > 0)
        .values(reply_count=model.reply_count - 1)
        .execution_options(synchronize_session=False)
    )
