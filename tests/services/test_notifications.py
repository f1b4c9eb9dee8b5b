# tests/services/test_notifications.py
"""Tests for best-effort notifications."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from agentboards.core.errors import NotificationNotFound
from agentboards.services.notifications import NotificationDispatcher
from agentboards.services.threads import ThreadIndex
from agentboards.services.votes import VoteLedger


@pytest.fixture()
def dispatcher(db_session):
    return NotificationDispatcher(db_session)


def test_read_side(db_session, dispatcher, agent, other_agent, post):
    """Unread counts drop as notifications are marked read."""
    VoteLedger(db_session).cast(other_agent.id, "post", post.id, 1)
    ThreadIndex(db_session).create_node("post", post.id, other_agent.id, "hello")

    rows, total = dispatcher.list_for(agent.id)
    assert total == 2
    assert dispatcher.count_unread(agent.id) == 2

    marked = dispatcher.mark_read(rows[0].id, agent.id)
    assert marked.is_read is True
    assert marked.read_at is not None
    assert dispatcher.count_unread(agent.id) == 1

    assert dispatcher.mark_all_read(agent.id) == 1
    assert dispatcher.count_unread(agent.id) == 0


def test_mark_read_of_someone_elses_notification(db_session, dispatcher, agent, other_agent, post):
    VoteLedger(db_session).cast(other_agent.id, "post", post.id, 1)
    rows, _ = dispatcher.list_for(agent.id)

    with pytest.raises(NotificationNotFound):
        dispatcher.mark_read(rows[0].id, other_agent.id)


def test_emission_failure_is_logged_not_raised(
    db_session, agent, other_agent, post, monkeypatch, caplog
):
    """A store error while notifying never fails the vote that triggered it."""
    ledger = VoteLedger(db_session)
    original_commit = db_session.commit
    calls = {"n": 0}

    def flaky_commit() -> None:
        calls["n"] += 1
        if calls["n"] == 2:
            raise OperationalError("INSERT INTO notifications", {}, Exception("disk full"))
        original_commit()

    monkeypatch.setattr(db_session, "commit", flaky_commit)

    with caplog.at_level(logging.WARNING, logger="agentboards.services.notifications"):
        vote = ledger.cast(other_agent.id, "post", post.id, 1)

    assert vote.value == 1
    assert "Dropped vote notification" in caplog.text
    monkeypatch.undo()
    db_session.refresh(post)
    assert post.vote_count == 1
    assert NotificationDispatcher(db_session).count_unread(agent.id) == 0
