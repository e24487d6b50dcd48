from __future__ import annotations

import pytest

from vim_multicursor.commands import (
    CommandQueue,
    DeleteBackward,
    FindAll,
    InsertText,
    Move,
    Newline,
)


def test_queue_is_first_in_first_out() -> None:
    queue = CommandQueue([InsertText("a")])
    queue.push(Newline())

    assert isinstance(queue.pop(), InsertText)
    assert isinstance(queue.pop(), Newline)
    assert queue.pop() is None


def test_drain_picks_up_commands_pushed_while_draining() -> None:
    queue = CommandQueue([InsertText("a")])
    seen = []

    for command in queue.drain():
        seen.append(command)
        if len(seen) == 1:
            queue.push(Newline())

    assert [type(command) for command in seen] == [InsertText, Newline]
    assert len(queue) == 0


def test_queue_rejects_non_commands() -> None:
    queue = CommandQueue()

    with pytest.raises(TypeError):
        queue.push("i")  # type: ignore[arg-type]


def test_commands_validate_their_arguments() -> None:
    with pytest.raises(ValueError):
        InsertText("")
    with pytest.raises(ValueError):
        DeleteBackward(count=0)
    with pytest.raises(ValueError):
        Move("sideways")
    with pytest.raises(ValueError):
        FindAll("")
