"""Ordered multi-cursor set with a primary cursor."""

from __future__ import annotations

import itertools
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from vim_multicursor.buffer import Position
from vim_multicursor.runtime.telemetry import record_event, span

from .errors import NoMatchFound
from .locator import MatchLocator, MatchSpan, RegexMatchLocator
from .models import Cursor

WrapKey = Tuple[int, Position]


class MultiCursorSet:
    """Owns the cursors of one editing session.

    Cursors are kept in ascending position order; the primary cursor is the
    most recently added one and anchors relative searches. The set never
    touches the buffer: searches receive the current lines explicitly.
    """

    def __init__(
        self,
        *,
        locator: Optional[MatchLocator] = None,
        logger_name: str | None = "vim_multicursor.cursors",
    ) -> None:
        self.locator: MatchLocator = locator or RegexMatchLocator()
        self.pattern: Optional[str] = None
        self._cursors: List[Cursor] = []
        self._history: List[int] = []
        self._primary: Optional[int] = None
        self._ids = itertools.count(1)
        self._logger_name = logger_name

    def __len__(self) -> int:
        return len(self._cursors)

    def __iter__(self) -> Iterator[Cursor]:
        return iter(self.cursors())

    def __contains__(self, cursor: object) -> bool:
        return any(existing is cursor for existing in self._cursors)

    @property
    def primary(self) -> Optional[Cursor]:
        for cursor in self._cursors:
            if cursor.id == self._primary:
                return cursor
        return None

    def cursors(self) -> Tuple[Cursor, ...]:
        """Cursors in ascending buffer position (the replication order)."""

        return tuple(sorted(self._cursors, key=lambda cursor: cursor.position))

    def positions(self) -> Tuple[Position, ...]:
        return tuple(cursor.position for cursor in self.cursors())

    def primary_index(self) -> int:
        for index, cursor in enumerate(self.cursors()):
            if cursor.id == self._primary:
                return index
        return 0

    def add(self, cursor: Cursor, *, make_primary: bool = True) -> Cursor:
        if any(existing.position == cursor.position for existing in self._cursors):
            raise ValueError(f"A cursor already sits at {cursor.position}")
        return self._track(cursor, make_primary=make_primary)

    def _track(self, cursor: Cursor, *, make_primary: bool = True) -> Cursor:
        cursor.id = next(self._ids)
        self._cursors.append(cursor)
        self._history.append(cursor.id)
        if make_primary or self._primary is None:
            self._primary = cursor.id
        return cursor

    def add_span(self, match: MatchSpan) -> Cursor:
        return self.add(Cursor(match.line, match.start, anchor=match.last))

    def add_next(
        self,
        pattern: str,
        lines: Sequence[str],
        *,
        origin: Optional[Position] = None,
    ) -> Cursor:
        """Add a cursor on the next free occurrence after the primary cursor.

        With an empty set the search starts at ``origin`` (the host's cursor),
        matches starting there included. The search wraps at the end of the
        buffer and gives up at the first existing cursor it reaches, so an
        occurrence is never selected twice.
        """

        with span(
            "cursors::add_next",
            component="cursors",
            cursors=len(self._cursors),
            logger_name=self._logger_name,
            pattern=pattern,
        ) as record:
            spans = self.locator.find_all(lines, pattern)
            primary = self.primary
            start = self._search_origin(primary) if primary is not None else origin
            match = self._next_free(spans, start or (0, 0))
            if match is None:
                record.set("status", "not_found")
                raise NoMatchFound(pattern)
            cursor = self.add_span(match)
            self.pattern = pattern
            record.set("status", "added")
            return cursor

    def add_all(
        self,
        pattern: str,
        lines: Sequence[str],
        *,
        first_line: int = 0,
        last_line: Optional[int] = None,
    ) -> Tuple[Cursor, ...]:
        """Replace the set with one cursor per match; the last one is primary."""

        with span(
            "cursors::add_all",
            component="cursors",
            cursors=len(self._cursors),
            logger_name=self._logger_name,
            pattern=pattern,
            lines=len(lines),
        ) as record:
            spans = self.locator.find_all(
                lines, pattern, first_line=first_line, last_line=last_line
            )
            if not spans:
                record.set("status", "not_found")
                raise NoMatchFound(pattern)
            self.clear()
            for match in spans:
                self.add_span(match)
            self.pattern = pattern
            record.set("matches", len(spans))
            return self.cursors()

    def skip(self, pattern: str, lines: Sequence[str]) -> Cursor:
        """Drop the primary cursor and select the next occurrence instead."""

        skipped = self.primary
        if skipped is None:
            return self.add_next(pattern, lines)
        origin = self._search_origin(skipped)
        self._forget(skipped)
        spans = [
            match
            for match in self.locator.find_all(lines, pattern)
            if match.first != skipped.selection_bounds()[0]
        ]
        match = self._next_free(spans, origin)
        if match is None:
            self._restore(skipped)
            raise NoMatchFound(pattern)
        self.pattern = pattern
        return self.add_span(match)

    def remove_last(self) -> Optional[Cursor]:
        """Undo the most recent add; the previously added cursor becomes primary."""

        removed = self.primary
        if removed is None:
            return None
        self._forget(removed)
        record_event(
            "cursors.remove_last",
            level="debug",
            data={"position": removed.position, "remaining": len(self._cursors)},
            logger_name=self._logger_name,
        )
        return removed

    def remove(self, cursor: Cursor) -> None:
        self._forget(cursor)

    def promote(self, cursor: Cursor) -> None:
        if cursor not in self:
            raise ValueError(f"{cursor!r} is not part of this set")
        self._primary = cursor.id

    def collapse(self) -> Optional[Cursor]:
        """Discard every cursor except the primary and return it."""

        primary = self.primary
        if primary is None:
            self.clear()
            return None
        self._cursors = [primary]
        self._history = [primary.id]
        return primary

    def clear(self) -> None:
        self._cursors.clear()
        self._history.clear()
        self._primary = None

    def restore(self, positions: Sequence[Position], primary_index: int = 0) -> None:
        """Rebuild the set from bare positions (used by undo/redo).

        Repeated positions are kept: insert mode allows coincident cursors.
        """

        self.clear()
        cursors = [self._track(Cursor(line, column)) for line, column in positions]
        if cursors:
            index = min(max(primary_index, 0), len(cursors) - 1)
            self._primary = cursors[index].id

    def normalize(self, *, keep: Iterable[int] = ()) -> List[Cursor]:
        """Sort the set and merge cursors that landed on the same position.

        Of two colliding cursors the primary survives, then any id listed in
        ``keep``, then whichever was added first. Returns the merged-away ones.
        """

        preferred = set(keep)

        def rank(cursor: Cursor) -> tuple[Position, int, int]:
            if cursor.id == self._primary:
                weight = 0
            elif cursor.id in preferred:
                weight = 1
            else:
                weight = 2
            return cursor.position, weight, cursor.id

        survivors: List[Cursor] = []
        removed: List[Cursor] = []
        for cursor in sorted(self._cursors, key=rank):
            if survivors and survivors[-1].position == cursor.position:
                removed.append(cursor)
            else:
                survivors.append(cursor)
        self._cursors = survivors
        if removed:
            gone = {cursor.id for cursor in removed}
            self._history = [cid for cid in self._history if cid not in gone]
        return removed

    def _search_origin(self, cursor: Cursor) -> Position:
        line, column = cursor.selection_bounds()[1]
        return (line, column + 1)

    def _next_free(
        self, spans: Sequence[MatchSpan], origin: Position
    ) -> Optional[MatchSpan]:
        key = _wrap_key(origin)
        barrier: Optional[WrapKey] = None
        if self._cursors:
            barrier = min(key(cursor.selection_bounds()[0]) for cursor in self._cursors)
        for match in sorted(spans, key=lambda item: key(item.first)):
            if barrier is not None and key(match.first) >= barrier:
                break
            if not self._occupied(match):
                return match
        return None

    def _occupied(self, match: MatchSpan) -> bool:
        for cursor in self._cursors:
            first, last = cursor.selection_bounds()
            if first <= match.last and match.first <= last:
                return True
        return False

    def _forget(self, cursor: Cursor) -> None:
        self._cursors = [existing for existing in self._cursors if existing is not cursor]
        self._history = [cid for cid in self._history if cid != cursor.id]
        if self._primary == cursor.id:
            self._primary = self._history[-1] if self._history else None

    def _restore(self, cursor: Cursor) -> None:
        self._cursors.append(cursor)
        self._history.append(cursor.id)
        self._primary = cursor.id


def _wrap_key(origin: Position) -> Callable[[Position], WrapKey]:
    def key(position: Position) -> WrapKey:
        return (0, position) if position >= origin else (1, position)

    return key


__all__ = ["MultiCursorSet"]
