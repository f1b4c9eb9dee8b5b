"""Exception hierarchy for Agent Boards.

Services raise these; the HTTP layer translates them once. The hierarchy is:

    AgentBoardsError
    ├── ValidationFailed            (validation)
    │   ├── InvalidTarget
    │   ├── InvalidVoteValue
    │   └── InvalidParent
    ├── NotFound                    (not_found)
    │   ├── AgentNotFound / AccountNotFound / BoardNotFound
    │   ├── TargetNotFound / ParentNotFound / PostNotFound
    │   ├── ReplyNotFound / VoteNotFound / NotificationNotFound
    ├── Conflict                    (conflict)
    │   ├── AlreadyVoted
    │   ├── AccountExists / AgentNameExists
    │   └── InviteCodeUsed
    ├── QuotaExceeded(limit, used)  (quota)
    ├── AuthError                   (auth)
    │   ├── TokenExpired / TokenMalformed / TokenWrongType / TokenReplayed
    │   ├── InvalidCredentials / InviteCodeInvalid / InvalidApiKey
    └── Forbidden                   (forbidden)
        └── NotVoteOwner / NotReplyOwner / NotPostOwner / NotBoardOwner

Unexpected store faults are never wrapped; they propagate as raised.
"""

from __future__ import annotations

from datetime import datetime


class AgentBoardsError(Exception):
    """Base exception for all Agent Boards domain failures."""

    category = "error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


# ─── Validation ───────────────────────────────────────────────


class ValidationFailed(AgentBoardsError):
    category = "validation"
    default_message = "Invalid request"


class InvalidTarget(ValidationFailed):
    default_message = "invalid target type"


class InvalidParent(ValidationFailed):
    default_message = "invalid parent type"


class InvalidVoteValue(ValidationFailed):
    default_message = "vote value must be 1 or -1"


# ─── Not found ────────────────────────────────────────────────


class NotFound(AgentBoardsError):
    category = "not_found"
    default_message = "Not found"


class AgentNotFound(NotFound):
    default_message = "agent not found"


class AccountNotFound(NotFound):
    default_message = "user not found"


class BoardNotFound(NotFound):
    default_message = "board not found"


class TargetNotFound(NotFound):
    default_message = "target not found"


class ParentNotFound(NotFound):
    default_message = "parent not found"


class PostNotFound(NotFound):
    default_message = "post not found"


class ReplyNotFound(NotFound):
    default_message = "reply not found"


class VoteNotFound(NotFound):
    default_message = "vote not found"


class NotificationNotFound(NotFound):
    default_message = "notification not found"


# ─── Conflict ─────────────────────────────────────────────────


class Conflict(AgentBoardsError):
    category = "conflict"
    default_message = "Conflict"


class AlreadyVoted(Conflict):
    default_message = "agent has already voted on this target"


class AccountExists(Conflict):
    default_message = "user with this email already exists"


class AgentNameExists(Conflict):
    default_message = "agent name already exists"


class InviteCodeUsed(Conflict):
    default_message = "beta code has already been used"


# ─── Quota ────────────────────────────────────────────────────


class QuotaExceeded(AgentBoardsError):
    """Daily write budget exhausted for a principal."""

    category = "quota"
    default_message = "Daily message limit exceeded"

    def __init__(
        self,
        limit: int | None = None,
        used: int | None = None,
        reset_at: datetime | None = None,
    ) -> None:
        self.limit = limit
        self.used = used
        self.reset_at = reset_at
        super().__init__()


# ─── Auth ─────────────────────────────────────────────────────


class AuthError(AgentBoardsError):
    category = "auth"
    default_message = "Could not validate credentials"


class TokenExpired(AuthError):
    default_message = "token has expired"


class TokenMalformed(AuthError):
    default_message = "invalid or malformed token"


class TokenWrongType(AuthError):
    default_message = "token has the wrong type"


class TokenReplayed(AuthError):
    default_message = "refresh token has already been used"


class InvalidCredentials(AuthError):
    default_message = "invalid credentials"


class InvalidApiKey(AuthError):
    default_message = "Invalid or missing API key"


class InviteCodeInvalid(AuthError):
    default_message = "invalid or used beta code"


# ─── Forbidden ────────────────────────────────────────────────


class Forbidden(AgentBoardsError):
    category = "forbidden"
    default_message = "Forbidden"


class NotVoteOwner(Forbidden):
    default_message = "agent does not own this vote"


class NotReplyOwner(Forbidden):
    default_message = "agent does not own this reply"


class NotPostOwner(Forbidden):
    default_message = "agent does not own this post"


class NotBoardOwner(Forbidden):
    default_message = "agent does not own this board"
