from __future__ import annotations

import pytest

from vim_multicursor.buffer import Buffer, BufferValidationError


def test_from_text_splits_lines_and_keeps_one_line_minimum() -> None:
    assert Buffer.from_text("a\nb").lines() == ("a", "b")
    assert Buffer.from_text("").lines() == ("",)
    assert Buffer.from_text("a\r\nb\n").lines() == ("a", "b", "")
    assert Buffer.from_lines([]).lines() == ("",)


def test_insert_at_with_newline_reports_end_position() -> None:
    buffer = Buffer.from_text("hello world")

    end = buffer.insert_at((0, 5), "\nX")

    assert buffer.lines() == ("hello", "X world")
    assert end == (1, 1)


def test_delete_range_across_lines_returns_removed_text() -> None:
    buffer = Buffer.from_text("ab\ncd\nef")

    removed = buffer.delete_range((0, 1), (2, 1))

    assert removed == "b\ncd\ne"
    assert buffer.lines() == ("af",)


def test_split_and_join_line() -> None:
    buffer = Buffer.from_text("abcd")

    assert buffer.split_line((0, 2)) == (1, 0)
    assert buffer.lines() == ("ab", "cd")

    assert buffer.join_line(0) == (0, 2)
    assert buffer.lines() == ("abcd",)


def test_join_line_on_last_line_is_rejected() -> None:
    buffer = Buffer.from_text("only")

    with pytest.raises(BufferValidationError):
        buffer.join_line(0)


def test_out_of_range_positions_raise_validation_error() -> None:
    buffer = Buffer.from_text("abc")

    with pytest.raises(BufferValidationError) as excinfo:
        buffer.insert_at((3, 0), "x")
    assert excinfo.value.position == (3, 0)

    with pytest.raises(BufferValidationError):
        buffer.insert_at((0, 4), "x")

    with pytest.raises(BufferValidationError):
        buffer.line_at(5)


def test_one_past_end_column_is_a_valid_insertion_point() -> None:
    buffer = Buffer.from_text("abc")

    buffer.insert_at((0, 3), "!")

    assert buffer.text == "abc!"


def test_every_primitive_bumps_the_version() -> None:
    buffer = Buffer.from_text("abc")
    start = buffer.version

    buffer.insert_at((0, 0), "x")
    buffer.delete_range((0, 0), (0, 1))
    buffer.split_line((0, 1))
    buffer.join_line(0)

    assert buffer.version == start + 4
    assert buffer.line_count == 1
    assert buffer.line_at(0) == "abc"


def test_get_text_range_accepts_reversed_bounds() -> None:
    buffer = Buffer.from_text("hello\nworld")

    assert buffer.get_text_range((1, 2), (0, 3)) == "lo\nwo"


def test_snapshot_is_detached_from_later_edits() -> None:
    buffer = Buffer.from_text("abc")
    view = buffer.snapshot()

    buffer.insert_at((0, 0), "x")

    assert view.lines == ("abc",)
    assert view.text == "abc"
    assert buffer.snapshot().version == view.version + 1


def test_transaction_records_undo_only_when_text_changed() -> None:
    buffer = Buffer.from_text("abc")

    with buffer.transaction("noop") as tx:
        entry = tx.commit(((0, 0),), ((0, 0),))
    assert entry is None
    assert len(buffer.undo) == 0

    with buffer.transaction("insert") as tx:
        buffer.insert_at((0, 0), "x")
        entry = tx.commit(((0, 0),), ((0, 1),))

    assert entry is not None
    assert entry.before_lines == ("abc",)
    assert entry.after_lines == ("xabc",)
    assert buffer.undo.undo() is entry
