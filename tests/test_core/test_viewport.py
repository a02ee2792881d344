# tests/test_core/test_viewport.py
"""Tests for cursor movement and scrolling in `tedit.core.Viewport`."""

from tedit.core.Keys import Key
from tedit.core.LineStore import LineStore
from tedit.core.Viewport import Viewport


def make_store(lines: list[bytes]) -> LineStore:
    store = LineStore()
    store.load(lines)
    return store


def test_scroll_follows_cursor_down_and_up() -> None:
    store = make_store([b"x"] * 20)
    vp = Viewport(rows=5, cols=10)
    vp.cy = 7
    vp.scroll(store)
    assert vp.row_offset == 3

    vp.cy = 1
    vp.scroll(store)
    assert vp.row_offset == 1


def test_scroll_uses_display_column() -> None:
    store = make_store([b"\tx"])
    vp = Viewport(rows=5, cols=5)
    vp.cx = 1
    vp.scroll(store)
    assert vp.rx == 8
    assert vp.col_offset == 4


def test_scroll_on_virtual_row_has_zero_rx() -> None:
    store = make_store([b"abc"])
    vp = Viewport(rows=5, cols=5)
    vp.cy = 1
    vp.scroll(store)
    assert vp.rx == 0


def test_left_at_line_start_wraps_to_previous_end() -> None:
    store = make_store([b"abc", b"de"])
    vp = Viewport(rows=5, cols=10)
    vp.cy = 1
    vp.move_cursor(store, Key.ARROW_LEFT)
    assert (vp.cy, vp.cx) == (0, 3)


def test_left_at_document_start_stays() -> None:
    store = make_store([b"abc"])
    vp = Viewport(rows=5, cols=10)
    vp.move_cursor(store, Key.ARROW_LEFT)
    assert (vp.cy, vp.cx) == (0, 0)


def test_right_at_line_end_wraps_to_next_start() -> None:
    store = make_store([b"ab", b"cd"])
    vp = Viewport(rows=5, cols=10)
    vp.cx = 2
    vp.move_cursor(store, Key.ARROW_RIGHT)
    assert (vp.cy, vp.cx) == (1, 0)


def test_right_on_virtual_row_does_nothing() -> None:
    store = make_store([b"ab"])
    vp = Viewport(rows=5, cols=10)
    vp.cy = 1
    vp.move_cursor(store, Key.ARROW_RIGHT)
    assert (vp.cy, vp.cx) == (1, 0)


def test_vertical_moves_clamp_column() -> None:
    store = make_store([b"long line", b"ab"])
    vp = Viewport(rows=5, cols=20)
    vp.cx = 8
    vp.move_cursor(store, Key.ARROW_DOWN)
    assert (vp.cy, vp.cx) == (1, 2)

    vp.move_cursor(store, Key.ARROW_DOWN)
    assert (vp.cy, vp.cx) == (2, 0)

    vp.move_cursor(store, Key.ARROW_DOWN)
    assert vp.cy == 2


def test_snapshot_and_restore() -> None:
    vp = Viewport(rows=5, cols=10)
    vp.cx, vp.cy, vp.row_offset, vp.col_offset = 1, 2, 3, 4
    snap = vp.snapshot()
    vp.cx = vp.cy = vp.row_offset = vp.col_offset = 0
    vp.restore(snap)
    assert (vp.cx, vp.cy, vp.row_offset, vp.col_offset) == (1, 2, 3, 4)


def test_resize_never_goes_negative() -> None:
    vp = Viewport()
    vp.resize(-2, 40)
    assert (vp.rows, vp.cols) == (0, 40)
