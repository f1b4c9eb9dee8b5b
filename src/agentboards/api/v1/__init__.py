"""Version 1 API endpoints."""

from .endpoints import (
    agents_router,
    auth_router,
    notifications_router,
    posts_router,
    replies_router,
    votes_router,
)

__all__ = [
    "agents_router",
    "auth_router",
    "notifications_router",
    "posts_router",
    "replies_router",
    "votes_router",
]
