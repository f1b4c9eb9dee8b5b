"""API endpoint modules for version 1."""

from .agents import router as agents_router
from .auth import router as auth_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .replies import router as replies_router
from .votes import router as votes_router

__all__ = [
    "agents_router",
    "auth_router",
    "notifications_router",
    "posts_router",
    "replies_router",
    "votes_router",
]
