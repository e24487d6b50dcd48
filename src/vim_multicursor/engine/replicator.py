"""Replicates one editing command across every cursor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, Type

from vim_multicursor.buffer import Buffer, Position, step_back, step_forward
from vim_multicursor.commands import (
    ChangeSelection,
    DeleteBackward,
    DeleteForward,
    DeleteSelection,
    EditCommand,
    EnterInsert,
    EnterVisual,
    ExitInsert,
    ExitVisual,
    InsertText,
    Move,
    Newline,
    OpenLine,
    Put,
    YankSelection,
)
from vim_multicursor.cursors import Cursor, Edit, OutOfBounds, RegisterValue, rebase
from vim_multicursor.runtime import EngineSettings
from vim_multicursor.runtime.telemetry import record_event, span

from .base import SessionBus


@dataclass(slots=True)
class ReplicationReport:
    label: str
    applied: int = 0
    edits: int = 0
    skipped: List[Tuple[Position, str]] = field(default_factory=list)
    # (merged-away cursor, surviving cursor)
    merged: List[Tuple[Cursor, Cursor]] = field(default_factory=list)
    switch_to: Optional[str] = None
    # Coincident cursors are distinct insertion sites while in insert mode.
    keeps_coincident: bool = False


@dataclass(slots=True)
class _Run:
    command: EditCommand
    mode: str
    cursors: List[Cursor]
    report: ReplicationReport
    processed: Set[int] = field(default_factory=set)

    def is_processed(self, cursor: Cursor) -> bool:
        return id(cursor) in self.processed

    @property
    def linewise(self) -> bool:
        return self.mode == "visual_line"

    def next_pending(self) -> Optional[Cursor]:
        pending = [c for c in self.cursors if id(c) not in self.processed]
        if not pending:
            return None
        return min(pending, key=lambda cursor: cursor.position)


class _Skip(Exception):
    """Nothing to do for this cursor (e.g. no selection, empty register)."""


Handler = Callable[[Cursor, EditCommand, _Run], None]


class CommandReplicator:
    """Applies commands once per cursor in ascending position order.

    After every single application the edit is described as an ``Edit`` and
    every other cursor (position and anchor) is rebased through it before the
    next cursor is picked, so later cursors always see the text as earlier
    ones left it. A step that would leave the buffer becomes a no-op for that
    cursor only.
    """

    def __init__(
        self,
        buffer: Buffer,
        *,
        settings: Optional[EngineSettings] = None,
        bus: Optional[SessionBus] = None,
        logger_name: str | None = "vim_multicursor.replicator",
    ) -> None:
        self.buffer = buffer
        self.settings = settings or EngineSettings()
        self.bus = bus
        self._logger_name = logger_name
        self._handlers: Dict[Type[EditCommand], Handler] = {
            InsertText: self._insert_text,
            Newline: self._newline,
            DeleteBackward: self._delete_backward,
            DeleteForward: self._delete_forward,
            OpenLine: self._open_line,
            EnterInsert: self._enter_insert,
            ExitInsert: self._exit_insert,
            EnterVisual: self._enter_visual,
            ExitVisual: self._exit_visual,
            ChangeSelection: self._change_selection,
            DeleteSelection: self._delete_selection,
            YankSelection: self._yank_selection,
            Put: self._put,
            Move: self._move,
        }

    def supports(self, command: object) -> bool:
        return type(command) in self._handlers

    def replicate(
        self, command: EditCommand, cursors: Sequence[Cursor], *, mode: str
    ) -> ReplicationReport:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"No replication rule for {type(command).__name__}")

        report = ReplicationReport(label=command.label)
        report.switch_to = self._next_mode(command, mode)
        report.keeps_coincident = (report.switch_to or mode) == "insert"
        run = _Run(command=command, mode=mode, cursors=list(cursors), report=report)
        with span(
            f"replicate::{command.label}",
            component="replicator",
            cursors=len(run.cursors),
            command=command.label,
            logger_name=self._logger_name,
            mode=mode,
        ) as record:
            while True:
                cursor = run.next_pending()
                if cursor is None:
                    break
                run.processed.add(id(cursor))
                try:
                    handler(cursor, command, run)
                    report.applied += 1
                except OutOfBounds as exc:
                    self._note_skip(run, cursor, str(exc))
                except _Skip as exc:
                    self._note_skip(run, cursor, str(exc))
                if not report.keeps_coincident:
                    self._merge_collisions(run)
            record.set("applied", report.applied)
            record.set("edits", report.edits)
            record.set("merged", len(report.merged))
        return report

    # -- edit plumbing -------------------------------------------------

    def _replace(
        self,
        run: _Run,
        active: Cursor,
        start: Position,
        end: Position,
        text: str,
    ) -> Position:
        new_end = self.buffer.replace_range(start, end, text)
        edit = Edit(start=start, end=end, new_end=new_end)
        if edit.is_noop:
            return new_end
        for other in run.cursors:
            if other is active:
                continue
            # A processed cursor sharing the edit point already holds its own
            # text there; only pending cursors are pushed past the new text.
            if not (run.is_processed(other) and other.position == start):
                other.move_to(rebase(other.position, edit))
            if other.anchor is not None:
                other.anchor = rebase(other.anchor, edit)
        run.report.edits += 1
        return new_end

    def _merge_collisions(self, run: _Run) -> None:
        """Merge processed cursors that share a position.

        Pending cursors are never merged: they still owe their own
        application. Processed cursors sort first, so a pending cursor is only
        ever compared against the cursor before it.
        """

        def rank(cursor: Cursor) -> tuple[Position, int]:
            return cursor.position, 0 if run.is_processed(cursor) else 1

        survivors: List[Cursor] = []
        for cursor in sorted(run.cursors, key=rank):
            if (
                survivors
                and survivors[-1].position == cursor.position
                and run.is_processed(cursor)
            ):
                run.report.merged.append((cursor, survivors[-1]))
                continue
            survivors.append(cursor)
        run.cursors = survivors

    def _note_skip(self, run: _Run, cursor: Cursor, reason: str) -> None:
        run.report.skipped.append((cursor.position, reason))
        payload = {
            "command": run.command.label,
            "position": cursor.position,
            "reason": reason,
        }
        record_event(
            "replicate.skip", level="debug", data=payload, logger_name=self._logger_name
        )
        if self.bus is not None:
            self.bus.emit("replicate.skip", payload)

    def _selection(self, cursor: Cursor, run: _Run) -> Tuple[Position, Position]:
        """Exclusive ``[start, end)`` covered by the cursor's selection."""

        if cursor.anchor is None:
            raise _Skip("no selection")
        first, last = cursor.selection_bounds()
        last_line = self.buffer.line_at(last[0])
        if run.linewise:
            return (first[0], 0), (last[0], len(last_line))
        return first, (last[0], min(last[1] + 1, len(last_line)))

    def _take_selection(self, cursor: Cursor, run: _Run) -> Tuple[Position, Position]:
        start, end = self._selection(cursor, run)
        kind = "line" if run.linewise else "character"
        cursor.register = RegisterValue(
            text=self.buffer.get_text_range(start, end), type=kind
        )
        cursor.clear_selection()
        return start, end

    # -- handlers ------------------------------------------------------

    def _insert_text(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        assert isinstance(command, InsertText)
        self._type(cursor, command.text, run)

    def _newline(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        self._type(cursor, "\n", run)

    def _type(self, cursor: Cursor, text: str, run: _Run) -> None:
        position = cursor.position
        cursor.move_to(self._replace(run, cursor, position, position, text))

    def _delete_backward(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        assert isinstance(command, DeleteBackward)
        start = step_back(self.buffer.lines(), cursor.position, command.count)
        if start is None:
            raise OutOfBounds("delete past buffer start", position=cursor.position)
        self._replace(run, cursor, start, cursor.position, "")
        cursor.move_to(start)

    def _delete_forward(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        assert isinstance(command, DeleteForward)
        end = step_forward(self.buffer.lines(), cursor.position, command.count)
        if end is None:
            raise OutOfBounds("delete past buffer end", position=cursor.position)
        self._replace(run, cursor, cursor.position, end, "")

    def _open_line(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        assert isinstance(command, OpenLine)
        cursor.clear_selection()
        line = cursor.line
        if command.above:
            self._replace(run, cursor, (line, 0), (line, 0), "\n")
            cursor.move_to((line, 0))
        else:
            eol = (line, len(self.buffer.line_at(line)))
            self._replace(run, cursor, eol, eol, "\n")
            cursor.move_to((line + 1, 0))

    def _enter_insert(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        assert isinstance(command, EnterInsert)
        cursor.clear_selection()
        if command.after and cursor.column < len(self.buffer.line_at(cursor.line)):
            cursor.column += 1

    def _exit_insert(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        if self.settings.exit_insert_moves_left and cursor.column > 0:
            cursor.column -= 1

    def _enter_visual(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        if cursor.anchor is None:
            cursor.anchor = cursor.position

    def _exit_visual(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        cursor.clear_selection()

    def _change_selection(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        start, end = self._take_selection(cursor, run)
        self._replace(run, cursor, start, end, "")
        cursor.move_to(start)

    def _delete_selection(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        start, end = self._take_selection(cursor, run)
        if not run.linewise:
            self._replace(run, cursor, start, end, "")
            cursor.move_to(start)
            return

        first_line, last_line = start[0], end[0]
        if last_line + 1 < self.buffer.line_count:
            self._replace(run, cursor, (first_line, 0), (last_line + 1, 0), "")
            cursor.move_to((first_line, 0))
        elif first_line > 0:
            previous = (first_line - 1, len(self.buffer.line_at(first_line - 1)))
            self._replace(run, cursor, previous, end, "")
            cursor.move_to((first_line - 1, 0))
        else:
            self._replace(run, cursor, (0, 0), end, "")
            cursor.move_to((0, 0))

    def _yank_selection(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        start, _ = self._take_selection(cursor, run)
        cursor.move_to(start)

    def _put(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        assert isinstance(command, Put)
        register = cursor.register
        if register is None or not register.text:
            raise _Skip("empty register")
        line, column = cursor.position
        if register.type == "line":
            if command.before:
                self._replace(run, cursor, (line, 0), (line, 0), register.text + "\n")
                cursor.move_to((line, 0))
            else:
                eol = (line, len(self.buffer.line_at(line)))
                self._replace(run, cursor, eol, eol, "\n" + register.text)
                cursor.move_to((line + 1, 0))
            return

        if command.before:
            target = (line, column)
        else:
            target = (line, min(column + 1, len(self.buffer.line_at(line))))
        end_line, end_column = self._replace(run, cursor, target, target, register.text)
        cursor.move_to((end_line, max(end_column - 1, 0)))

    def _move(self, cursor: Cursor, command: EditCommand, run: _Run) -> None:
        assert isinstance(command, Move)
        line, column = cursor.position
        if command.direction == "left":
            column = max(column - command.count, 0)
        elif command.direction == "right":
            column = min(column + command.count, len(self.buffer.line_at(line)))
        else:
            step = -command.count if command.direction == "up" else command.count
            line = min(max(line + step, 0), self.buffer.line_count - 1)
            column = min(column, len(self.buffer.line_at(line)))
        cursor.move_to((line, column))

    @staticmethod
    def _next_mode(command: EditCommand, mode: str) -> Optional[str]:
        if isinstance(command, (OpenLine, EnterInsert, ChangeSelection)):
            return "insert"
        if isinstance(command, (ExitInsert, ExitVisual, DeleteSelection, YankSelection)):
            return "normal"
        if isinstance(command, EnterVisual):
            return "visual_line" if command.linewise else "visual"
        return None


__all__ = ["CommandReplicator", "ReplicationReport"]
