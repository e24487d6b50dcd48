"""Cursor and per-cursor register data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from vim_multicursor.buffer import Position, ordered


@dataclass(slots=True)
class RegisterValue:
    text: str
    type: str = "character"  # character or line


@dataclass(slots=True, eq=False)
class Cursor:
    """A tracked edit point.

    ``anchor`` is set only while the cursor holds a visual selection; the
    selection runs between ``anchor`` and the cursor position, both ends
    included. Identity (``id``) survives every move so the owning set can keep
    track of its primary cursor while positions are rebased.
    """

    line: int
    column: int
    anchor: Optional[Position] = None
    register: Optional[RegisterValue] = None
    id: int = 0

    @property
    def position(self) -> Position:
        return (self.line, self.column)

    def move_to(self, position: Position) -> None:
        self.line, self.column = position

    @property
    def has_selection(self) -> bool:
        return self.anchor is not None

    def selection_bounds(self) -> tuple[Position, Position]:
        """Return ``(first, last)`` of the selection, or the position twice."""

        if self.anchor is None:
            return self.position, self.position
        return ordered(self.anchor, self.position)

    def clear_selection(self) -> None:
        self.anchor = None

    def copy(self) -> "Cursor":
        return Cursor(
            line=self.line,
            column=self.column,
            anchor=self.anchor,
            register=self.register,
            id=self.id,
        )

    def __repr__(self) -> str:
        anchor = f", anchor={self.anchor}" if self.anchor is not None else ""
        return f"Cursor(id={self.id}, at={self.position}{anchor})"
