"""Editing session: the explicit owner of buffer, cursors, and mode."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Type

from vim_multicursor.buffer import Buffer, Position, UndoEntry
from vim_multicursor.commands import (
    AddNextOccurrence,
    CollapseCursors,
    Command,
    CommandQueue,
    EditCommand,
    FindAll,
    Redo,
    RemoveLastCursor,
    SkipOccurrence,
    Undo,
)
from vim_multicursor.cursors import (
    Cursor,
    InvalidPattern,
    MatchLocator,
    MultiCursorSet,
    NoMatchFound,
    RegexMatchLocator,
    literal_pattern,
    word_at,
)
from vim_multicursor.runtime import EngineSettings, telemetry

from .base import MODES, CommandResult, SessionBus, SessionView
from .replicator import CommandReplicator, ReplicationReport

SessionHandler = Callable[["EditingSession", Command], CommandResult]


class EditingSession:
    """One logical editing session.

    Commands are queued and consumed strictly one at a time; each is fully
    replicated over every cursor before the next is taken. With an empty
    cursor set the session edits through its single ordinary cursor.
    """

    def __init__(
        self,
        buffer: Optional[Buffer] = None,
        *,
        locator: Optional[MatchLocator] = None,
        settings: Optional[EngineSettings] = None,
        bus: Optional[SessionBus] = None,
    ) -> None:
        self.settings = settings or EngineSettings.from_env()
        self.buffer = buffer or Buffer()
        self.bus = bus or SessionBus()
        self.cursor = Cursor(0, 0)
        self.cursor_set = MultiCursorSet(
            locator=locator
            or RegexMatchLocator(case_sensitive=self.settings.case_sensitive)
        )
        self.replicator = CommandReplicator(
            self.buffer, settings=self.settings, bus=self.bus
        )
        self.queue = CommandQueue()
        self._mode = "normal"

    @classmethod
    def from_text(cls, text: str, **kwargs) -> "EditingSession":
        return cls(Buffer.from_text(text), **kwargs)

    @classmethod
    def from_lines(cls, lines: Iterable[str], **kwargs) -> "EditingSession":
        return cls(Buffer.from_lines(lines), **kwargs)

    # -- queries -------------------------------------------------------

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def multi(self) -> bool:
        return len(self.cursor_set) > 0

    def lines(self) -> Tuple[str, ...]:
        return tuple(self.buffer.lines())

    def cursors(self) -> Tuple[Cursor, ...]:
        if self.multi:
            return self.cursor_set.cursors()
        return (self.cursor,)

    def cursor_positions(self) -> Tuple[Position, ...]:
        return tuple(cursor.position for cursor in self.cursors())

    def primary_position(self) -> Position:
        primary = self.cursor_set.primary
        return primary.position if primary is not None else self.cursor.position

    def snapshot(self) -> SessionView:
        cursors = self.cursors()
        return SessionView(
            version=self.buffer.version,
            lines=self.lines(),
            cursors=tuple(cursor.position for cursor in cursors),
            primary=self.cursor_set.primary_index() if self.multi else 0,
            mode=self._mode,
            selections=tuple(cursor.anchor for cursor in cursors),
        )

    def move_cursor(self, line: int, column: int) -> None:
        """Place the ordinary cursor (single-cursor mode only)."""

        if self.multi:
            raise RuntimeError("Collapse the cursor set before placing the cursor")
        line = min(max(line, 0), self.buffer.line_count - 1)
        column = min(max(column, 0), len(self.buffer.line_at(line)))
        self.cursor.move_to((line, column))

    # -- command intake ------------------------------------------------

    def submit(self, command: Command) -> None:
        self.queue.push(command)

    def drain(self) -> List[CommandResult]:
        return [self._dispatch(command) for command in self.queue.drain()]

    def feed(self, commands: Iterable[Command]) -> List[CommandResult]:
        self.queue.extend(commands)
        return self.drain()

    def execute(self, command: Command) -> CommandResult:
        results = self.feed([command])
        return results[-1]

    def _dispatch(self, command: Command) -> CommandResult:
        handler = _SESSION_HANDLERS.get(type(command))
        if handler is not None:
            return handler(self, command)
        if isinstance(command, EditCommand) and self.replicator.supports(command):
            return self._replicate(command)
        raise TypeError(f"Unsupported command {type(command).__name__}")

    # -- replication ---------------------------------------------------

    def _replicate(self, command: EditCommand) -> CommandResult:
        cursors = self.cursors()
        before = self._positions()
        with self.buffer.transaction(command.label) as tx:
            report = self.replicator.replicate(command, cursors, mode=self._mode)
            self._absorb(report)
            tx.commit(
                before[0],
                self._positions()[0],
                primary_before=before[1],
                primary_after=self._positions()[1],
            )
        if report.switch_to:
            self._switch_mode(report.switch_to)
        self.bus.emit(
            "replicate.done",
            {
                "command": command.label,
                "applied": report.applied,
                "skipped": len(report.skipped),
            },
        )
        status = "ok" if not report.skipped else "partial"
        if report.skipped and report.applied == 0:
            status = "skipped"
        return CommandResult(
            consumed=True,
            status=status,
            message=command.label,
            switch_to=report.switch_to,
            skipped=tuple(position for position, _ in report.skipped),
        )

    def _absorb(self, report: ReplicationReport) -> None:
        if not self.multi:
            return
        for gone, survivor in report.merged:
            was_primary = self.cursor_set.primary is gone
            self.cursor_set.remove(gone)
            if was_primary:
                self.cursor_set.promote(survivor)
        removed = [] if report.keeps_coincident else self.cursor_set.normalize()
        if report.merged or removed:
            self.bus.emit(
                "cursors.removed",
                {"merged": len(report.merged) + len(removed)},
            )

    def _positions(self) -> Tuple[Tuple[Position, ...], int]:
        if self.multi:
            return self.cursor_set.positions(), self.cursor_set.primary_index()
        return (self.cursor.position,), 0

    def _switch_mode(self, name: str) -> None:
        if name not in MODES:
            raise KeyError(f"Unknown mode '{name}'")
        if name == self._mode:
            return
        previous = self._mode
        self._mode = name
        telemetry.record_event(
            "mode.switch",
            level="debug",
            data={"mode": name, "previous": previous},
            logger_name="vim_multicursor.session",
        )
        self.bus.emit("mode.switch", {"mode": name, "previous": previous})

    # -- cursor-set operations -----------------------------------------

    def add_next(self, pattern: Optional[str] = None) -> CommandResult:
        return self.execute(AddNextOccurrence(pattern=pattern))

    def add_all(
        self, pattern: str, *, first_line: int = 0, last_line: Optional[int] = None
    ) -> CommandResult:
        return self.execute(
            FindAll(pattern=pattern, first_line=first_line, last_line=last_line)
        )

    def collapse(self) -> CommandResult:
        return self.execute(CollapseCursors())

    def undo(self) -> CommandResult:
        return self.execute(Undo())

    def redo(self) -> CommandResult:
        return self.execute(Redo())

    def _add_next(self, command: AddNextOccurrence) -> CommandResult:
        lines = self.buffer.lines()
        try:
            if self.multi:
                pattern = command.pattern or self.cursor_set.pattern
                if pattern is None:
                    return _not_found("")
                cursor = self.cursor_set.add_next(pattern, lines)
            elif command.pattern is None:
                cursor = self._seed_from_cursor()
            else:
                cursor = self.cursor_set.add_next(
                    command.pattern, lines, origin=self.cursor.position
                )
        except NoMatchFound as exc:
            return _not_found(exc.pattern)
        except InvalidPattern as exc:
            return _invalid(exc)

        self._switch_mode("visual")
        self.bus.emit("cursors.added", {"position": cursor.position, "count": len(self.cursor_set)})
        return CommandResult(
            consumed=True, status="cursor_added", message=self.cursor_set.pattern
        )

    def _seed_from_cursor(self) -> Cursor:
        """Turn the word (or visual selection) under the cursor into the first cursor."""

        line_text = self.buffer.line_at(self.cursor.line)
        if self.cursor.anchor is not None and self.cursor.anchor[0] == self.cursor.line:
            first, last = self.cursor.selection_bounds()
            start, end = first[1], min(last[1] + 1, len(line_text))
            whole_word = False
        else:
            bounds = word_at(line_text, self.cursor.column)
            if bounds is None:
                raise NoMatchFound("")
            start, end = bounds
            whole_word = self.settings.whole_word
        if end <= start:
            raise NoMatchFound("")
        word = line_text[start:end]
        self.cursor_set.clear()
        seeded = self.cursor_set.add(
            Cursor(self.cursor.line, start, anchor=(self.cursor.line, end - 1))
        )
        self.cursor_set.pattern = literal_pattern(word, whole_word=whole_word)
        return seeded

    def _find_all(self, command: FindAll) -> CommandResult:
        try:
            found = self.cursor_set.add_all(
                command.pattern,
                self.buffer.lines(),
                first_line=command.first_line,
                last_line=command.last_line,
            )
        except NoMatchFound as exc:
            return _not_found(exc.pattern)
        except InvalidPattern as exc:
            return _invalid(exc)
        self._switch_mode("visual")
        self.bus.emit("cursors.added", {"count": len(found), "pattern": command.pattern})
        return CommandResult(
            consumed=True, status="cursors_found", message=str(len(found))
        )

    def _skip(self, command: SkipOccurrence) -> CommandResult:
        pattern = self.cursor_set.pattern
        if not self.multi or pattern is None:
            return _not_found(pattern or "")
        try:
            self.cursor_set.skip(pattern, self.buffer.lines())
        except NoMatchFound as exc:
            return _not_found(exc.pattern)
        self.bus.emit("cursors.added", {"count": len(self.cursor_set), "skip": True})
        return CommandResult(consumed=True, status="cursor_skipped", message=pattern)

    def _remove_last(self, command: RemoveLastCursor) -> CommandResult:
        if not self.multi:
            return CommandResult(consumed=False, status="empty_set")
        removed = self.cursor_set.remove_last()
        self.bus.emit("cursors.removed", {"position": removed.position if removed else None})
        if not self.multi:
            self._leave_multi(removed)
        return CommandResult(consumed=True, status="cursor_removed")

    def _collapse(self, command: CollapseCursors) -> CommandResult:
        if not self.multi:
            self.cursor.clear_selection()
            self._switch_mode("normal")
            return CommandResult(consumed=True, status="single_cursor")
        primary = self.cursor_set.collapse()
        self._leave_multi(primary)
        self.bus.emit("cursors.collapsed", {"position": self.cursor.position})
        return CommandResult(consumed=True, status="collapsed", switch_to="normal")

    def _leave_multi(self, survivor: Optional[Cursor]) -> None:
        if survivor is not None:
            self.cursor.move_to(survivor.position)
            self.cursor.register = survivor.register
        self.cursor.clear_selection()
        self.cursor_set.clear()
        self._switch_mode("normal")

    # -- undo ------------------------------------------------------------

    def _undo(self, command: Undo) -> CommandResult:
        entry = self.buffer.undo.undo()
        if entry is None:
            return CommandResult(consumed=False, status="nothing_to_undo")
        self._restore(entry.before_lines, entry.cursors_before, entry.primary_before)
        return CommandResult(consumed=True, status="undo", message=entry.label)

    def _redo(self, command: Redo) -> CommandResult:
        entry = self.buffer.undo.redo()
        if entry is None:
            return CommandResult(consumed=False, status="nothing_to_redo")
        self._restore(entry.after_lines, entry.cursors_after, entry.primary_after)
        return CommandResult(consumed=True, status="redo", message=entry.label)

    def _restore(
        self, lines: Sequence[str], positions: Tuple[Position, ...], primary: int
    ) -> None:
        self.buffer.replace_lines(lines)
        if len(positions) > 1:
            self.cursor_set.restore(positions, primary)
        else:
            self.cursor_set.clear()
            if positions:
                self.cursor.move_to(positions[0])
            self.cursor.clear_selection()
        self._switch_mode("normal")

    def history(self) -> Tuple[UndoEntry, ...]:
        return tuple(self.buffer.undo.entries())


def _not_found(pattern: str) -> CommandResult:
    return CommandResult(consumed=True, status="not_found", message=pattern)


def _invalid(exc: InvalidPattern) -> CommandResult:
    return CommandResult(consumed=True, status="invalid_pattern", message=exc.reason)


_SESSION_HANDLERS: Dict[Type[Command], SessionHandler] = {
    AddNextOccurrence: EditingSession._add_next,  # type: ignore[dict-item]
    FindAll: EditingSession._find_all,  # type: ignore[dict-item]
    SkipOccurrence: EditingSession._skip,  # type: ignore[dict-item]
    RemoveLastCursor: EditingSession._remove_last,  # type: ignore[dict-item]
    CollapseCursors: EditingSession._collapse,  # type: ignore[dict-item]
    Undo: EditingSession._undo,  # type: ignore[dict-item]
    Redo: EditingSession._redo,  # type: ignore[dict-item]
}


__all__ = ["EditingSession"]
