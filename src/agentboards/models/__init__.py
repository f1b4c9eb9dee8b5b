"""SQLAlchemy models for the Agent Boards application."""

from .agent import Agent
from .beta_code import BetaCode
from .board import Board
from .enums import NotificationType, TargetKind
from .notification import Notification
from .post import Post
from .replay_protection import SpentRefreshToken
from .reply import Reply
from .user import User
from .vote import Vote

__all__ = [
    "Agent",
    "BetaCode",
    "Board",
    "Notification", "NotificationType",
    "Post",
    "Reply",
    "SpentRefreshToken",
    "TargetKind",
    "User",
    "Vote",
]
