"""
Server-side actions behind the poll and auth routes.
"""
from . import auth_actions, poll_actions

__all__ = ["auth_actions", "poll_actions"]
