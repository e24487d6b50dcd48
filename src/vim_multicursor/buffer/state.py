"""Position types shared by the buffer and the cursor layer."""

from __future__ import annotations

from typing import Sequence, Tuple

Position = Tuple[int, int]  # (line, column)
Span = Tuple[Position, Position]  # [start, end)


def ordered(first: Position, second: Position) -> Span:
    if first <= second:
        return first, second
    return second, first


def end_of_text(start: Position, text: str) -> Position:
    """Position just past ``text`` once inserted at ``start``."""

    line, column = start
    pieces = text.split("\n")
    if len(pieces) == 1:
        return (line, column + len(text))
    return (line + len(pieces) - 1, len(pieces[-1]))


def step_back(lines: Sequence[str], position: Position, count: int) -> Position | None:
    """Walk ``count`` characters backwards; a line break counts as one.

    Returns ``None`` when the walk would pass the start of the buffer.
    """

    line, column = position
    remaining = count
    while remaining > 0:
        if column >= remaining:
            return (line, column - remaining)
        remaining -= column + 1
        line -= 1
        if line < 0:
            return None
        column = len(lines[line])
    return (line, column)


def step_forward(
    lines: Sequence[str], position: Position, count: int
) -> Position | None:
    """Walk ``count`` characters forwards; ``None`` past the end of the buffer."""

    line, column = position
    remaining = count
    while remaining > 0:
        available = len(lines[line]) - column
        if available >= remaining:
            return (line, column + remaining)
        remaining -= available + 1
        line += 1
        if line >= len(lines):
            return None
        column = 0
    return (line, column)
