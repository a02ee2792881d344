# tests/test_core/test_search.py
"""
Tests for incremental search
============================

Drives `SearchEngine.on_key` the way the prompt does: once per keystroke,
with the query typed so far.
"""

import pytest

from tedit.core.Highlighter import Highlight
from tedit.core.Keys import Key
from tedit.core.LineStore import LineStore
from tedit.core.Search import MatchResult, SearchEngine
from tedit.core.Viewport import Viewport


@pytest.fixture
def engine() -> SearchEngine:
    store = LineStore()
    store.load([b"aaa", b"bbb", b"cc x", b"ddd", b"eee"])
    viewport = Viewport(rows=3, cols=80)
    viewport.cx, viewport.cy, viewport.row_offset = 1, 4, 2
    return SearchEngine(store, viewport)


def test_match_moves_cursor_and_overlays(engine: SearchEngine) -> None:
    engine.begin()
    result = engine.on_key(b"x", ord("x"))

    assert result == MatchResult(line=2, cx=3, rx=3, length=1)
    assert (engine.viewport.cy, engine.viewport.cx) == (2, 3)
    assert engine.viewport.row_offset == 5
    assert engine.store[2].hl[3] == Highlight.SEARCH_MATCH


def test_escape_restores_cursor_and_highlight(engine: SearchEngine) -> None:
    engine.begin()
    engine.on_key(b"x", ord("x"))
    engine.on_key(b"x", Key.ESCAPE)

    vp = engine.viewport
    assert (vp.cx, vp.cy, vp.row_offset, vp.col_offset) == (1, 4, 2, 0)
    assert engine.store[2].hl == [Highlight.NORMAL] * 4
    assert not engine.active


def test_enter_keeps_cursor_on_match(engine: SearchEngine) -> None:
    engine.begin()
    engine.on_key(b"x", ord("x"))
    engine.on_key(b"x", Key.ENTER)

    assert (engine.viewport.cy, engine.viewport.cx) == (2, 3)
    assert Highlight.SEARCH_MATCH not in engine.store[2].hl
    assert not engine.active


def test_no_match_leaves_state_unchanged(engine: SearchEngine) -> None:
    engine.begin()
    assert engine.on_key(b"zz", ord("z")) is None
    vp = engine.viewport
    assert (vp.cx, vp.cy, vp.row_offset) == (1, 4, 2)
    assert all(Highlight.SEARCH_MATCH not in line.hl for line in engine.store)


def test_overlay_does_not_survive_next_key(engine: SearchEngine) -> None:
    engine.begin()
    engine.on_key(b"x", ord("x"))
    engine.on_key(b"xq", ord("q"))
    assert engine.store[2].hl == [Highlight.NORMAL] * 4


def test_empty_query_does_not_move(engine: SearchEngine) -> None:
    engine.begin()
    assert engine.on_key(b"", Key.BACKSPACE) is None
    assert engine.viewport.cy == 4


def test_arrows_step_and_wrap() -> None:
    store = LineStore()
    store.load([b"x1", b"y", b"x2"])
    engine = SearchEngine(store, Viewport(rows=10, cols=80))
    engine.begin()

    assert engine.on_key(b"x", ord("x")).line == 0
    assert engine.on_key(b"x", Key.ARROW_DOWN).line == 2
    assert engine.on_key(b"x", Key.ARROW_RIGHT).line == 0
    assert engine.on_key(b"x", Key.ARROW_UP).line == 2
    assert engine.on_key(b"x", Key.ARROW_LEFT).line == 0


def test_backward_key_without_match_searches_forward() -> None:
    store = LineStore()
    store.load([b"a", b"x", b"x"])
    engine = SearchEngine(store, Viewport(rows=10, cols=80))
    engine.begin()
    assert engine.on_key(b"x", Key.ARROW_UP).line == 1


def test_match_after_tab_maps_back_to_raw_column() -> None:
    store = LineStore()
    store.load([b"\tx"])
    engine = SearchEngine(store, Viewport(rows=10, cols=80))
    engine.begin()
    result = engine.on_key(b"x", ord("x"))
    assert (result.rx, result.cx) == (8, 1)


def test_search_in_empty_buffer() -> None:
    engine = SearchEngine(LineStore(), Viewport(rows=10, cols=80))
    engine.begin()
    assert engine.on_key(b"x", ord("x")) is None


def test_key_without_open_search_is_ignored(engine: SearchEngine) -> None:
    assert engine.on_key(b"x", ord("x")) is None
    assert engine.viewport.cy == 4
