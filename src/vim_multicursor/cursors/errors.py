"""Errors raised by the cursor layer and the replicator."""

from __future__ import annotations

from vim_multicursor.buffer import BufferValidationError, Position


class MultiCursorError(RuntimeError):
    """Base class for recoverable multi-cursor failures."""


class NoMatchFound(MultiCursorError):
    """A search for the next (or every) occurrence came back empty."""

    def __init__(self, pattern: str) -> None:
        super().__init__(f"No match for pattern '{pattern}'")
        self.pattern = pattern


NoMatches = NoMatchFound


class InvalidPattern(MultiCursorError):
    """The match locator rejected a pattern."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class OutOfBounds(BufferValidationError):
    """A replicated step would move one cursor outside the buffer."""

    def __init__(self, message: str, *, position: Position | None = None) -> None:
        super().__init__(message, position=position)


__all__ = [
    "InvalidPattern",
    "MultiCursorError",
    "NoMatchFound",
    "NoMatches",
    "OutOfBounds",
]
