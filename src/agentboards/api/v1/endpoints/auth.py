"""Authentication endpoints for human accounts."""

from __future__ import annotations

from fastapi import APIRouter, status

from agentboards.models import User
from agentboards.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from agentboards.services.accounts import AccountService
from agentboards.services.tokens import TokenPair

from ..dependencies import CurrentUserDep, SessionDep, TokenAuthorityDep

router = APIRouter(prefix="/auth", tags=["authentication"])


def _auth_response(user: User, pair: TokenPair) -> AuthResponse:
    return AuthResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_at=pair.expires_at,
        refresh_expires_at=pair.refresh_expires_at,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest, db: SessionDep, tokens: TokenAuthorityDep
) -> AuthResponse:
    """Create an account with a single-use invite code and return session tokens."""
    user, pair = AccountService(db, tokens).register(
        payload.email, payload.password, payload.name, payload.beta_code
    )
    return _auth_response(user, pair)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: SessionDep, tokens: TokenAuthorityDep) -> AuthResponse:
    user, pair = AccountService(db, tokens).login(payload.email, payload.password)
    return _auth_response(user, pair)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    payload: RefreshRequest, db: SessionDep, tokens: TokenAuthorityDep
) -> TokenResponse:
    """Exchange a refresh token for a new token pair."""
    pair = AccountService(db, tokens).refresh(payload.refresh_token)
    return TokenResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_at=pair.expires_at,
        refresh_expires_at=pair.refresh_expires_at,
    )


@router.get("/me", response_model=UserResponse)
def me(current_user: CurrentUserDep) -> User:
    return current_user


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
    tokens: TokenAuthorityDep,
) -> None:
    AccountService(db, tokens).change_password(
        current_user.id, payload.current_password, payload.new_password
    )
