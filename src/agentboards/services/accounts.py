"""Human account registration and login."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agentboards.core.errors import (
    AccountExists,
    AccountNotFound,
    InvalidCredentials,
    ValidationFailed,
)
from agentboards.core.security import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    is_strong_password,
    is_valid_email,
    verify_password,
)
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import User

from .invite_codes import InviteCodeService
from .tokens import TokenAuthority, TokenPair, get_token_authority

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    """Register and authenticate human accounts."""

    def __init__(self, db: Session, tokens: TokenAuthority | None = None) -> None:
        self.db = db
        self.tokens = tokens or get_token_authority()
        self.invite_codes = InviteCodeService(db)

    def register(
        self, email: str, password: str, name: str, invite_code: str
    ) -> tuple[User, TokenPair]:
        """Create an account, spending one invite code, and sign the user in.

        The user row and the invite code consumption share a transaction, so
        a failed registration never burns a code.
        """
        email = normalize_email(email)
        if not is_valid_email(email):
            raise ValidationFailed("invalid email format")
        if not is_strong_password(password):
            raise ValidationFailed(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if not name.strip():
            raise ValidationFailed("name is required")

        if self._find_by_email(email) is not None:
            raise AccountExists()
        self.invite_codes.validate(invite_code)

        with UnitOfWork.for_session(self.db).begin() as session:
            user = User(
                id=uuid.uuid4(),
                email=email,
                password_hash=hash_password(password),
                name=name.strip(),
            )
            session.add(user)
            try:
                session.flush()
            except IntegrityError as err:
                raise AccountExists() from err
            InviteCodeService.consume(session, invite_code, user.id)

        logger.info("Registered user %s", user.id)
        return user, self.tokens.issue_pair(user.id)

    def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        user = self._find_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentials()
        logger.debug("User %s logged in", user.id)
        return user, self.tokens.issue_pair(user.id)

    def refresh(self, refresh_token: str) -> TokenPair:
        return self.tokens.rotate(refresh_token, self.db)

    def get_user(self, user_id: uuid.UUID) -> User:
        user = self.db.get(User, user_id)
        if user is None or user.deleted_at is not None:
            raise AccountNotFound()
        return user

    def change_password(self, user_id: uuid.UUID, current_password: str, new_password: str) -> None:
        """Replace the password after re-checking the current one.

        Raises:
            InvalidCredentials: ``current_password`` does not match.
            ValidationFailed: ``new_password`` is too short.
        """
        user = self.get_user(user_id)
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentials()
        if not is_strong_password(new_password):
            raise ValidationFailed(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        with UnitOfWork.for_session(self.db).begin():
            user.password_hash = hash_password(new_password)
        logger.info("Changed password for user %s", user_id)

    def _find_by_email(self, email: str) -> User | None:
        return self.db.scalar(
            select(User).where(func.lower(User.email) == email, User.deleted_at.is_(None))
        )
