"""Atomic execution of multi-row mutations.

Every write that touches more than one row (vote + counter, reply + parent
counter + quota, account + invite code) runs inside a :class:`UnitOfWork`.
On normal exit the transaction commits; on any exception, including ones that
are not domain errors, it rolls back and the original exception propagates
unchanged, so no partially-applied mutation is ever visible to other readers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar, cast

from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnitOfWork:
    """Scoped transaction guard around a SQLAlchemy session.

    Two modes are supported:

    - ``UnitOfWork(session_factory)`` opens a fresh session for every
      :meth:`begin` and closes it afterwards (scripts, background callers).
    - ``UnitOfWork.for_session(session)`` reuses a request-scoped session and
      leaves closing it to whoever created it.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | Callable[[], Session] | None = None,
        *,
        session: Session | None = None,
    ) -> None:
        if session_factory is None and session is None:
            raise ValueError("UnitOfWork requires a session factory or a session")
        self._factory = session_factory
        self._session = session

    @classmethod
    def for_session(cls, session: Session) -> UnitOfWork:
        return cls(session=session)

    @contextmanager
    def begin(self) -> Iterator[Session]:
        """Yield a session whose work is committed on success and rolled back on failure."""
        owns_session = self._session is None
        if self._session is not None:
            session = self._session
        else:
            session = cast(Callable[[], Session], self._factory)()
        try:
            yield session
            session.commit()
        except BaseException:
            self._rollback(session)
            raise
        finally:
            if owns_session:
                session.close()

    def run(self, work: Callable[[Session], T]) -> T:
        """Execute ``work`` inside one transaction and return its result."""
        with self.begin() as session:
            return work(session)

    @staticmethod
    def _rollback(session: Session) -> None:
        try:
            session.rollback()
        except Exception:
            # The in-flight exception is re-raised by begin().
            logger.error("Rollback failed after aborted unit of work", exc_info=True)
