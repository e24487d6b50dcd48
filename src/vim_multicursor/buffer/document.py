"""Line storage behind a buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


@dataclass(slots=True)
class BufferDocument:
    """Immutable-ish list of lines.

    Edits never touch an existing document; ``update_lines`` and ``replace``
    return a successor with a bumped ``version`` so snapshots handed out
    earlier stay valid. A document always holds at least one line and no line
    carries a line terminator.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0
    dirty: bool = False

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        normalized = text.replace("\r\n", "\n").replace("\r", "\n")
        return cls(_lines=normalized.split("\n"), version=0, dirty=False)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        return cls.from_text("\n".join(lines))

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    def replace(
        self, *, lines: Iterable[str], dirty: bool | None = None
    ) -> "BufferDocument":
        """Return a new document holding ``lines`` with a bumped version."""

        updated = BufferDocument(
            _lines=_sanitize(lines), version=self.version + 1
        )
        updated.dirty = bool(dirty if dirty is not None else self.dirty)
        return updated

    def update_lines(
        self, start: int, end: int, new_lines: Iterable[str]
    ) -> "BufferDocument":
        """Return a document with ``[start:end]`` replaced by ``new_lines``."""

        lines = list(self._lines)
        lines[start:end] = list(new_lines)
        return BufferDocument(_lines=_sanitize(lines), version=self.version + 1, dirty=True)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]


def _sanitize(lines: Iterable[str]) -> List[str]:
    result: List[str] = []
    for line in lines:
        result.extend(line.replace("\r\n", "\n").replace("\r", "\n").split("\n"))
    return result or [""]
