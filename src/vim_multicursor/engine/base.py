"""Result and event types shared by the replicator and the session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from vim_multicursor.buffer import Position

MODES = ("normal", "insert", "visual", "visual_line")


@dataclass(slots=True)
class CommandResult:
    """Outcome of one command.

    ``status`` is a short machine-readable tag (``ok``, ``not_found``,
    ``skipped``...); ``message`` carries optional detail for a host status
    line.
    """

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    switch_to: Optional[str] = None
    skipped: Tuple[Position, ...] = ()


@dataclass(slots=True)
class SessionView:
    """Host-friendly snapshot of a session after a command."""

    version: int
    lines: Tuple[str, ...]
    cursors: Tuple[Position, ...]
    primary: int
    mode: str
    selections: Tuple[Optional[Position], ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class SessionBus:
    """Minimal event bus so hosts can follow cursor and mode changes."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[object], None]) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


__all__ = ["CommandResult", "MODES", "SessionBus", "SessionView"]
