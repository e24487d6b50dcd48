"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .document import BufferDocument
from .state import Position


class BufferValidationError(RuntimeError):
    """Raised when a caller hands the buffer an out-of-range position."""

    def __init__(self, message: str, *, position: Position | None = None) -> None:
        super().__init__(message)
        self.position = position


def ensure_position(document: BufferDocument, position: Position) -> Position:
    line, column = position
    if line < 0 or line >= document.line_count:
        raise BufferValidationError("Line out of range", position=position)
    if column < 0 or column > len(document.get_line(line)):
        raise BufferValidationError("Column out of range", position=position)
    return position


def ensure_line(document: BufferDocument, line: int) -> int:
    if line < 0 or line >= document.line_count:
        raise BufferValidationError("Line out of range", position=(line, 0))
    return line
