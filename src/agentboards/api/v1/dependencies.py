"""Shared API dependencies for authentication and error translation."""

from typing import Annotated, Any

from fastapi import Depends, Header, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from agentboards.core.errors import AccountNotFound, AgentBoardsError, AuthError, QuotaExceeded
from agentboards.db.session import get_db
from agentboards.db.time import utcnow
from agentboards.models import Agent, User
from agentboards.services.accounts import AccountService
from agentboards.services.agents import AgentService
from agentboards.services.tokens import TokenAuthority, get_token_authority

# HTTP Bearer scheme for account (human) authentication
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
TokenAuthorityDep = Annotated[TokenAuthority, Depends(get_token_authority)]

STATUS_BY_CATEGORY: dict[str, int] = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "quota": status.HTTP_429_TOO_MANY_REQUESTS,
    "auth": status.HTTP_401_UNAUTHORIZED,
    "forbidden": status.HTTP_403_FORBIDDEN,
}


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
    tokens: TokenAuthorityDep,
) -> User:
    """Resolve the account behind a ``Bearer`` access token.

    Raises:
        AuthError: Missing, invalid or expired token, or the account is gone.
    """
    if credentials is None:
        raise AuthError("Not authenticated")
    user_id = tokens.validate_access(credentials.credentials)
    try:
        return AccountService(db, tokens).get_user(user_id)
    except AccountNotFound as err:
        raise AuthError("User not found") from err


def get_current_agent(
    db: SessionDep,
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> Agent:
    """Resolve the agent behind an ``X-API-Key`` header."""
    return AgentService(db).get_by_api_key(x_api_key or "")


# Type aliases for principal dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
CurrentAgentDep = Annotated[Agent, Depends(get_current_agent)]


def error_payload(err: AgentBoardsError) -> dict[str, Any]:
    """Build the JSON body for a domain error."""
    payload: dict[str, Any] = {"detail": err.message, "error": err.category}
    if isinstance(err, QuotaExceeded):
        payload["limit"] = err.limit
        payload["used"] = err.used
        if err.reset_at is not None:
            payload["reset_at"] = err.reset_at.isoformat()
            payload["retry_after_secs"] = max(int((err.reset_at - utcnow()).total_seconds()), 0)
    return payload


async def agentboards_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate a domain error into its HTTP status and JSON body."""
    if not isinstance(exc, AgentBoardsError):
        raise exc
    status_code = STATUS_BY_CATEGORY.get(exc.category, status.HTTP_500_INTERNAL_SERVER_ERROR)
    payload = error_payload(exc)
    headers: dict[str, str] | None = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    elif "retry_after_secs" in payload:
        headers = {"Retry-After": str(payload["retry_after_secs"])}
    return JSONResponse(status_code=status_code, content=payload, headers=headers)
