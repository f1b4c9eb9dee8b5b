"""Session token issuance, validation and rotation.

Tokens are HS256 JWTs carrying ``{sub, type, exp, iat, jti}``. Access tokens
are short-lived; refresh tokens live longer and can be exchanged for a fresh
pair through :meth:`TokenAuthority.rotate`.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Final

from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agentboards.core.errors import (
    AuthError,
    TokenExpired,
    TokenMalformed,
    TokenReplayed,
    TokenWrongType,
)
from agentboards.core.settings import settings
from agentboards.db.time import utcnow
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.models import SpentRefreshToken, User

logger = logging.getLogger(__name__)

ACCESS: Final[str] = "access"
REFRESH: Final[str] = "refresh"


@dataclass(frozen=True)
class TokenPair:
    """Access/refresh token pair returned on login, registration and refresh."""

    access_token: str
    refresh_token: str
    expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    subject: uuid.UUID
    token_type: str
    issued_at: datetime
    expires_at: datetime
    jti: str | None


def _timestamp(value: datetime) -> int:
    return int(value.timestamp())


class TokenAuthority:
    """Issue, validate and rotate signed session tokens bound to an account."""

    def __init__(
        self,
        *,
        secret_key: str | None = None,
        algorithm: str | None = None,
        access_ttl: timedelta | None = None,
        refresh_ttl: timedelta | None = None,
        single_use_refresh: bool | None = None,
    ) -> None:
        self._secret_key = secret_key or settings.secret_key
        self._algorithm = algorithm or settings.jwt_algorithm
        self.access_ttl = access_ttl or timedelta(minutes=settings.access_token_expire_minutes)
        self.refresh_ttl = refresh_ttl or timedelta(days=settings.refresh_token_expire_days)
        self.single_use_refresh = (
            settings.refresh_token_single_use if single_use_refresh is None else single_use_refresh
        )

    # --- Issuance -------------------------------------------------------------------
    def issue_pair(self, subject_id: uuid.UUID, now: datetime | None = None) -> TokenPair:
        """Create a signed access token and refresh token for ``subject_id``."""
        issued_at = (now or utcnow()).astimezone(UTC)
        access_expiry = issued_at + self.access_ttl
        refresh_expiry = issued_at + self.refresh_ttl
        return TokenPair(
            access_token=self._encode(subject_id, ACCESS, issued_at, access_expiry),
            refresh_token=self._encode(subject_id, REFRESH, issued_at, refresh_expiry),
            expires_at=access_expiry,
            refresh_expires_at=refresh_expiry,
        )

    def _encode(
        self,
        subject_id: uuid.UUID,
        token_type: str,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str:
        claims: dict[str, Any] = {
            "sub": str(subject_id),
            "type": token_type,
            "iat": _timestamp(issued_at),
            "exp": _timestamp(expires_at),
            "jti": uuid.uuid4().hex,
        }
        encoded: str = jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
        return encoded

    # --- Validation -----------------------------------------------------------------
    def decode(self, token: str, expected_type: str) -> TokenClaims:
        """Verify signature, expiry and type of ``token`` and return its claims.

        Raises:
            TokenExpired: The token's ``exp`` has passed.
            TokenMalformed: Bad encoding, bad signature, or missing claims.
            TokenWrongType: The ``type`` claim is not ``expected_type``.
        """
        if not token:
            raise TokenMalformed()
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as err:
            raise TokenExpired() from err
        except JWTError as err:
            raise TokenMalformed() from err

        if payload.get("type") != expected_type:
            raise TokenWrongType(f"expected a {expected_type} token")

        try:
            subject = uuid.UUID(str(payload["sub"]))
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        except (KeyError, TypeError, ValueError) as err:
            raise TokenMalformed() from err

        jti = payload.get("jti")
        return TokenClaims(
            subject=subject,
            token_type=expected_type,
            issued_at=issued_at,
            expires_at=expires_at,
            jti=str(jti) if jti is not None else None,
        )

    def validate_access(self, token: str) -> uuid.UUID:
        """Return the subject id of a valid access token."""
        return self.decode(token, ACCESS).subject

    def validate_refresh(self, token: str) -> TokenClaims:
        return self.decode(token, REFRESH)

    # --- Rotation -------------------------------------------------------------------
    def rotate(self, refresh_token: str, db: Session) -> TokenPair:
        """Exchange a valid refresh token for a brand-new pair.

        The subject must still be an active account. When single-use refresh
        tokens are enabled the presented token is recorded as spent in the
        same transaction, so a second exchange of it fails with
        :class:`TokenReplayed`.
        """
        claims = self.validate_refresh(refresh_token)

        user = db.get(User, claims.subject)
        if user is None or user.deleted_at is not None:
            raise AuthError("token subject no longer exists")

        # Claims hold whole seconds, so the new pair must start at least one
        # second after the old one for its expiry to be strictly later.
        issued_at = max(utcnow(), claims.issued_at + timedelta(seconds=1))

        if not self.single_use_refresh:
            return self.issue_pair(claims.subject, now=issued_at)

        if claims.jti is None:
            raise TokenMalformed("refresh token has no identifier")
        if db.get(SpentRefreshToken, claims.jti) is not None:
            logger.warning("Rejected replayed refresh token for user %s", claims.subject)
            raise TokenReplayed()

        with UnitOfWork.for_session(db).begin() as session:
            session.add(
                SpentRefreshToken(
                    jti=claims.jti,
                    user_id=claims.subject,
                    expires_at=claims.expires_at,
                )
            )
            try:
                session.flush()
            except IntegrityError as err:
                logger.warning("Concurrent refresh token reuse for user %s", claims.subject)
                raise TokenReplayed() from err

        logger.info("Rotated session tokens for user %s", claims.subject)
        return self.issue_pair(claims.subject, now=issued_at)


_token_authority: TokenAuthority | None = None


def get_token_authority() -> TokenAuthority:
    """Return the process-wide token authority."""
    global _token_authority
    if _token_authority is None:
        _token_authority = TokenAuthority()
    return _token_authority


def purge_spent_refresh_tokens(db: Session, now: datetime | None = None) -> int:
    """Delete spent-token records whose tokens have expired anyway."""
    result = db.execute(
        delete(SpentRefreshToken)
        .where(SpentRefreshToken.expires_at < (now or utcnow()))
        .execution_options(synchronize_session=False)
    )
    purged: int = result.rowcount  # type: ignore[attr-defined]
    logger.info("Purged %d expired refresh token records", purged)
    return purged
