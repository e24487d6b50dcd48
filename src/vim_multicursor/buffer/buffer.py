"""Buffer façade: line store, edit primitives, and undo history."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Iterable, Optional, Sequence, Tuple

from vim_multicursor.runtime import telemetry

from .document import BufferDocument
from .state import Position, end_of_text, ordered
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_line, ensure_position


@dataclass(slots=True)
class BufferView:
    version: int
    lines: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class Buffer:
    """Plain text-line store.

    The buffer knows nothing about cursors: every primitive takes explicit
    positions and reports where the edited text ends, leaving position
    bookkeeping to the caller.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.undo = undo or UndoTimeline()

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text))

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_lines(lines))

    @property
    def version(self) -> int:
        return self.document.version

    @property
    def line_count(self) -> int:
        return self.document.line_count

    @property
    def text(self) -> str:
        return "\n".join(self.document.snapshot())

    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    def line_at(self, line: int) -> str:
        return self.document.get_line(ensure_line(self.document, line))

    def snapshot(self) -> BufferView:
        return BufferView(
            version=self.document.version, lines=tuple(self.document.snapshot())
        )

    def replace_range(self, start: Position, end: Position, text: str) -> Position:
        """Replace ``[start, end)`` with ``text``; return the end of ``text``."""

        start = ensure_position(self.document, start)
        end = ensure_position(self.document, end)
        start, end = ordered(start, end)
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        head = self.document.get_line(start[0])[: start[1]]
        tail = self.document.get_line(end[0])[end[1] :]
        merged = head + text + tail
        self.document = self.document.update_lines(
            start[0], end[0] + 1, merged.split("\n")
        )
        return end_of_text(start, text)

    def insert_at(self, position: Position, text: str) -> Position:
        return self.replace_range(position, position, text)

    def delete_range(self, start: Position, end: Position) -> str:
        removed = self.get_text_range(start, end)
        self.replace_range(start, end, "")
        return removed

    def split_line(self, position: Position) -> Position:
        return self.insert_at(position, "\n")

    def join_line(self, line: int) -> Position:
        """Join ``line`` with the line below; return the join point."""

        ensure_line(self.document, line)
        ensure_line(self.document, line + 1)
        join_point = (line, len(self.document.get_line(line)))
        self.replace_range(join_point, (line + 1, 0), "")
        return join_point

    def get_text_range(self, start: Position, end: Position) -> str:
        start = ensure_position(self.document, start)
        end = ensure_position(self.document, end)
        start, end = ordered(start, end)
        if start[0] == end[0]:
            return self.document.get_line(start[0])[start[1] : end[1]]
        pieces = [self.document.get_line(start[0])[start[1] :]]
        for line in range(start[0] + 1, end[0]):
            pieces.append(self.document.get_line(line))
        pieces.append(self.document.get_line(end[0])[: end[1]])
        return "\n".join(pieces)

    def replace_lines(self, lines: Iterable[str]) -> None:
        self.document = self.document.replace(lines=lines, dirty=True)

    def transaction(self, label: str) -> "Transaction":
        return Transaction(self, label)


class Transaction(AbstractContextManager["Transaction"]):
    """Groups the primitives of one command into a single undo step."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self.before_lines: Sequence[str] = ()
        self.before_version = 0
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self.before_lines = self.buffer.lines()
        self.before_version = self.buffer.version
        self._span_cm = telemetry.span(
            f"buffer::{self.label}", component="buffer", buffer=self.buffer.name
        )
        self._span_cm.__enter__()
        return self

    @property
    def changed(self) -> bool:
        return self.buffer.version != self.before_version

    def commit(
        self,
        cursors_before: Tuple[Position, ...],
        cursors_after: Tuple[Position, ...],
        *,
        primary_before: int = 0,
        primary_after: int = 0,
    ) -> Optional[UndoEntry]:
        if not self.changed:
            return None
        entry = UndoEntry(
            label=self.label,
            before_lines=self.before_lines,
            after_lines=self.buffer.lines(),
            cursors_before=cursors_before,
            cursors_after=cursors_after,
            primary_before=primary_before,
            primary_after=primary_after,
        )
        self.buffer.undo.push(entry)
        return entry

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
