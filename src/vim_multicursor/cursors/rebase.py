"""Coordinate rebasing: keep stored positions valid across an edit."""

from __future__ import annotations

from dataclasses import dataclass

from vim_multicursor.buffer import Position, end_of_text


@dataclass(frozen=True, slots=True)
class Edit:
    """``[start, end)`` (pre-edit coordinates) became ``[start, new_end)``."""

    start: Position
    end: Position
    new_end: Position

    @classmethod
    def insertion(cls, start: Position, text: str) -> "Edit":
        return cls(start=start, end=start, new_end=end_of_text(start, text))

    @classmethod
    def deletion(cls, start: Position, end: Position) -> "Edit":
        return cls(start=start, end=end, new_end=start)

    @classmethod
    def replacement(cls, start: Position, end: Position, text: str) -> "Edit":
        return cls(start=start, end=end, new_end=end_of_text(start, text))

    @property
    def is_noop(self) -> bool:
        return self.start == self.end == self.new_end


def rebase(position: Position, edit: Edit) -> Position:
    """Map ``position`` through ``edit``.

    Positions before the edit are untouched, positions inside the removed
    span clamp to its start, and positions at or after its end move with the
    text that followed it (an insertion at a position pushes that position
    forward).
    """

    if position < edit.start:
        return position
    if position < edit.end:
        return edit.start

    line, column = position
    end_line, end_column = edit.end
    new_line, new_column = edit.new_end
    if line == end_line:
        return (new_line, new_column + column - end_column)
    return (line + new_line - end_line, column)


__all__ = ["Edit", "rebase"]
