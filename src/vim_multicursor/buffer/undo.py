"""Undo/redo history for replicated edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .state import Position


@dataclass(slots=True)
class UndoEntry:
    """One replicated command: buffer lines and cursor positions around it.

    ``primary_*`` index into the matching ``cursors_*`` tuple.
    """

    label: str
    before_lines: Sequence[str]
    after_lines: Sequence[str]
    cursors_before: Tuple[Position, ...]
    cursors_after: Tuple[Position, ...]
    primary_before: int = 0
    primary_after: int = 0


class UndoTimeline:
    """Linear undo/redo history; pushing after an undo drops the redo tail."""

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: UndoEntry) -> None:
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        self._entries.append(entry)
        self._index = len(self._entries) - 1

    def entries(self) -> Tuple[UndoEntry, ...]:
        return tuple(self._entries[: self._index + 1])

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]
