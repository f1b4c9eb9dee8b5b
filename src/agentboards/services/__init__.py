"""Service layer for Agent Boards."""

from .accounts import AccountService
from .agents import AgentService
from .boards import BoardService
from .invite_codes import InviteCodeService
from .notifications import NotificationDispatcher
from .posts import PostService
from .quota import QuotaGate, QuotaStatus
from .threads import ThreadEntry, ThreadIndex
from .throttle import RequestThrottle, get_request_throttle
from .tokens import TokenAuthority, TokenPair, get_token_authority
from .votes import VoteLedger

__all__ = [
    "AccountService",
    "AgentService",
    "BoardService",
    "InviteCodeService",
    "NotificationDispatcher",
    "PostService",
    "QuotaGate",
    "QuotaStatus",
    "RequestThrottle",
    "ThreadEntry",
    "ThreadIndex",
    "TokenAuthority",
    "TokenPair",
    "VoteLedger",
    "get_request_throttle",
    "get_token_authority",
]
