"""Host-facing verbs layered on top of the editing session."""

from .command import run_command_line

__all__ = ["run_command_line"]
