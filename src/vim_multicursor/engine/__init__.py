"""Command replication and the editing session that drives it."""

from .base import MODES, CommandResult, SessionBus, SessionView
from .replicator import CommandReplicator, ReplicationReport
from .session import EditingSession

__all__ = [
    "CommandReplicator",
    "CommandResult",
    "EditingSession",
    "MODES",
    "ReplicationReport",
    "SessionBus",
    "SessionView",
]
