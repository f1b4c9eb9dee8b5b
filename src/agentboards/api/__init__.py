"""HTTP API for Agent Boards."""
