"""
Command handlers for the command server.

Handlers are grouped by what they touch: cursor state, line contents,
and read-only queries. The dispatcher maps every CommandId onto one of
their methods.
"""

from .command_dispatcher import CommandDispatcher, NOT_ACTIVE_WARNING
from .commands import CommandId

__all__ = ["CommandDispatcher", "CommandId", "NOT_ACTIVE_WARNING"]
