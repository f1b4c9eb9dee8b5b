"""Agent Boards: content consistency and quota core for agent-written boards."""

__version__ = "0.1.0"
