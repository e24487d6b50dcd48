"""Match locator boundary and the default regex implementation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from vim_multicursor.buffer import Position

from .errors import InvalidPattern

_WORD = re.compile(r"\w+")


@dataclass(frozen=True, slots=True)
class MatchSpan:
    """A match on one line covering columns ``[start, end)``."""

    line: int
    start: int
    end: int

    @property
    def first(self) -> Position:
        return (self.line, self.start)

    @property
    def last(self) -> Position:
        """Position of the final matched character."""

        return (self.line, max(self.start, self.end - 1))


class MatchLocator(Protocol):
    """Finds pattern occurrences in buffer lines.

    Implementations return non-overlapping spans in ascending position order.
    """

    def find_all(
        self,
        lines: Sequence[str],
        pattern: str,
        *,
        first_line: int = 0,
        last_line: Optional[int] = None,
    ) -> List[MatchSpan]:
        ...


class RegexMatchLocator:
    """Line-by-line ``re`` search.

    Matches never cross a line break, the leftmost match wins when candidates
    overlap, and empty matches are ignored.
    """

    def __init__(self, *, case_sensitive: bool = True) -> None:
        self.case_sensitive = case_sensitive

    def compile(self, pattern: str) -> re.Pattern[str]:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        try:
            return re.compile(pattern, flags)
        except re.error as exc:
            raise InvalidPattern(pattern, str(exc)) from exc

    def find_all(
        self,
        lines: Sequence[str],
        pattern: str,
        *,
        first_line: int = 0,
        last_line: Optional[int] = None,
    ) -> List[MatchSpan]:
        compiled = self.compile(pattern)
        stop = len(lines) - 1 if last_line is None else min(last_line, len(lines) - 1)
        spans: List[MatchSpan] = []
        for index in range(max(first_line, 0), stop + 1):
            for match in compiled.finditer(lines[index]):
                if match.end() > match.start():
                    spans.append(MatchSpan(index, match.start(), match.end()))
        return spans


def word_at(line: str, column: int) -> Optional[tuple[int, int]]:
    """Return ``(start, end)`` of the word under ``column``, if any."""

    for match in _WORD.finditer(line):
        if match.start() <= column < match.end():
            return match.start(), match.end()
    return None


def literal_pattern(text: str, *, whole_word: bool = False) -> str:
    escaped = re.escape(text)
    if whole_word:
        return rf"\b{escaped}\b"
    return escaped


__all__ = [
    "MatchLocator",
    "MatchSpan",
    "RegexMatchLocator",
    "literal_pattern",
    "word_at",
]
