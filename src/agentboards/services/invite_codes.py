"""Invite codes gating account registration."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from agentboards.core.errors import InviteCodeInvalid, InviteCodeUsed
from agentboards.core.security import generate_invite_code, normalize_invite_code
from agentboards.db.time import utcnow
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import BetaCode

logger = logging.getLogger(__name__)

_MAX_GENERATION_ATTEMPTS = 5


class InviteCodeService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def generate(self, count: int = 1) -> list[BetaCode]:
        """Create ``count`` fresh, unused invite codes."""
        if count < 1:
            raise ValueError("count must be positive")
        codes: list[BetaCode] = []
        with UnitOfWork.for_session(self.db).begin() as session:
            for _ in range(count):
                code = self._unique_code(session, {c.code for c in codes})
                beta_code = BetaCode(code=code)
                session.add(beta_code)
                codes.append(beta_code)
        logger.info("Generated %d invite codes", len(codes))
        return codes

    @staticmethod
    def _unique_code(session: Session, pending: set[str]) -> str:
        for _ in range(_MAX_GENERATION_ATTEMPTS):
            code = generate_invite_code()
            if code in pending:
                continue
            if session.scalar(select(BetaCode.id).where(BetaCode.code == code)) is None:
                return code
        raise RuntimeError("could not generate a unique invite code")

    def validate(self, code: str) -> BetaCode:
        """Return the unused code row or raise the matching auth/conflict error."""
        beta_code = self.db.scalar(
            select(BetaCode).where(BetaCode.code == normalize_invite_code(code))
        )
        if beta_code is None:
            raise InviteCodeInvalid()
        if beta_code.is_used:
            raise InviteCodeUsed()
        return beta_code

    @staticmethod
    def consume(session: Session, code: str, user_id: uuid.UUID) -> None:
        """Mark ``code`` as used by ``user_id`` inside the caller's transaction.

        The update only matches an unused code, so two registrations racing on
        the same code cannot both succeed.
        """
        normalized = normalize_invite_code(code)
        result = session.execute(
            update(BetaCode)
            .where(BetaCode.code == normalized, BetaCode.is_used.is_(False))
            .values(is_used=True, used_by_id=user_id, used_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:  # type: ignore[attr-defined]
            exists = session.scalar(select(BetaCode.id).where(BetaCode.code == normalized))
            raise InviteCodeUsed() if exists is not None else InviteCodeInvalid()

    def count_available(self) -> int:
        total = self.db.scalar(
            select(func.count()).select_from(BetaCode).where(BetaCode.is_used.is_(False))
        )
        return int(total or 0)
