"""Command objects consumed by an editing session.

Hosts translate their own key handling into these; the session consumes them
one at a time. ``EditCommand`` subclasses are replicated across every cursor,
``CursorSetCommand`` subclasses reshape the cursor set itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

DIRECTIONS = ("left", "right", "up", "down")


@dataclass(frozen=True, slots=True)
class Command:
    label: ClassVar[str] = "command"


@dataclass(frozen=True, slots=True)
class EditCommand(Command):
    label: ClassVar[str] = "edit"


@dataclass(frozen=True, slots=True)
class CursorSetCommand(Command):
    label: ClassVar[str] = "cursors"


@dataclass(frozen=True, slots=True)
class InsertText(EditCommand):
    """Type literal text at every cursor; ``\\n`` opens a new line."""

    label: ClassVar[str] = "insert_text"
    text: str = ""

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("InsertText requires non-empty text")


@dataclass(frozen=True, slots=True)
class Newline(EditCommand):
    label: ClassVar[str] = "newline"


@dataclass(frozen=True, slots=True)
class DeleteBackward(EditCommand):
    label: ClassVar[str] = "delete_backward"
    count: int = 1

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError("count must be positive")


@dataclass(frozen=True, slots=True)
class DeleteForward(EditCommand):
    label: ClassVar[str] = "delete_forward"
    count: int = 1

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError("count must be positive")


@dataclass(frozen=True, slots=True)
class OpenLine(EditCommand):
    """``o`` (below) or ``O`` (above): open a line and start inserting there."""

    label: ClassVar[str] = "open_line"
    above: bool = False


@dataclass(frozen=True, slots=True)
class EnterInsert(EditCommand):
    """``i`` or, with ``after``, ``a``."""

    label: ClassVar[str] = "enter_insert"
    after: bool = False


@dataclass(frozen=True, slots=True)
class ExitInsert(EditCommand):
    label: ClassVar[str] = "exit_insert"


@dataclass(frozen=True, slots=True)
class EnterVisual(EditCommand):
    """``v`` or, with ``linewise``, ``V``."""

    label: ClassVar[str] = "enter_visual"
    linewise: bool = False


@dataclass(frozen=True, slots=True)
class ExitVisual(EditCommand):
    label: ClassVar[str] = "exit_visual"


@dataclass(frozen=True, slots=True)
class ChangeSelection(EditCommand):
    label: ClassVar[str] = "change_selection"


@dataclass(frozen=True, slots=True)
class DeleteSelection(EditCommand):
    label: ClassVar[str] = "delete_selection"


@dataclass(frozen=True, slots=True)
class YankSelection(EditCommand):
    label: ClassVar[str] = "yank_selection"


@dataclass(frozen=True, slots=True)
class Put(EditCommand):
    """Paste each cursor's own register after (or ``before``) the cursor."""

    label: ClassVar[str] = "put"
    before: bool = False


@dataclass(frozen=True, slots=True)
class Move(EditCommand):
    label: ClassVar[str] = "move"
    direction: str = "right"
    count: int = 1

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction '{self.direction}'")
        if self.count < 1:
            raise ValueError("count must be positive")


@dataclass(frozen=True, slots=True)
class AddNextOccurrence(CursorSetCommand):
    """``<C-n>``: with no pattern the word (or selection) under the cursor seeds it."""

    label: ClassVar[str] = "add_next"
    pattern: Optional[str] = None


@dataclass(frozen=True, slots=True)
class FindAll(CursorSetCommand):
    """Cursor on every match; ``first_line``/``last_line`` are 0-based, inclusive."""

    label: ClassVar[str] = "find_all"
    pattern: str = ""
    first_line: int = 0
    last_line: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.pattern:
            raise ValueError("FindAll requires a pattern")


@dataclass(frozen=True, slots=True)
class SkipOccurrence(CursorSetCommand):
    label: ClassVar[str] = "skip"


@dataclass(frozen=True, slots=True)
class RemoveLastCursor(CursorSetCommand):
    label: ClassVar[str] = "remove_last"


@dataclass(frozen=True, slots=True)
class CollapseCursors(CursorSetCommand):
    label: ClassVar[str] = "collapse"


@dataclass(frozen=True, slots=True)
class Undo(Command):
    label: ClassVar[str] = "undo"


@dataclass(frozen=True, slots=True)
class Redo(Command):
    label: ClassVar[str] = "redo"


__all__ = [
    "AddNextOccurrence",
    "ChangeSelection",
    "CollapseCursors",
    "Command",
    "CursorSetCommand",
    "DIRECTIONS",
    "DeleteBackward",
    "DeleteForward",
    "DeleteSelection",
    "EditCommand",
    "EnterInsert",
    "EnterVisual",
    "ExitInsert",
    "ExitVisual",
    "FindAll",
    "InsertText",
    "Move",
    "Newline",
    "OpenLine",
    "Put",
    "Redo",
    "RemoveLastCursor",
    "SkipOccurrence",
    "Undo",
    "YankSelection",
]
