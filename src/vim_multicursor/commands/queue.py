"""FIFO queue feeding commands to a session one at a time."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, Optional

from .models import Command


class CommandQueue:
    def __init__(self, commands: Iterable[Command] = ()) -> None:
        self._pending: Deque[Command] = deque(commands)

    def __len__(self) -> int:
        return len(self._pending)

    def push(self, command: Command) -> None:
        if not isinstance(command, Command):
            raise TypeError(f"Expected a Command, got {type(command).__name__}")
        self._pending.append(command)

    def extend(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self.push(command)

    def pop(self) -> Optional[Command]:
        if not self._pending:
            return None
        return self._pending.popleft()

    def drain(self) -> Iterator[Command]:
        """Yield queued commands in order, including ones pushed meanwhile."""

        while self._pending:
            yield self._pending.popleft()

    def clear(self) -> None:
        self._pending.clear()


__all__ = ["CommandQueue"]
