# tedit/core/Search.py
"""tedit.core.Search
===================

Incremental, wrap-around search driven one keystroke at a time.

The editor's prompt calls `SearchEngine.on_key(query, key)` after every key
typed while the search prompt is open. Each call:

1. restores the highlight of the previously matched line (the match overlay
   is temporary and never survives the next keystroke),
2. ends the search on Enter (keep the cursor) or Escape (restore the cursor
   and viewport captured by `begin`),
3. picks the direction: Right/Down search forward, Left/Up backward, any
   other key starts a fresh forward search from the top,
4. scans at most one full pass over the lines, wrapping at both ends, and
   moves the cursor to the first render buffer that contains the query,
   overlaying `Highlight.SEARCH_MATCH` on the matched bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tedit.core.Highlighter import Highlight
from tedit.core.Keys import Key
from tedit.core.LineStore import LineStore
from tedit.core.Renderer import rx_to_cx
from tedit.core.Viewport import Viewport, ViewportSnapshot

logger = logging.getLogger("tedit")


@dataclass
class SearchState:
    """Exists only while the search prompt is open."""

    last_match: Optional[int] = None
    direction: int = 1
    saved_line: Optional[int] = None
    saved_hl: Optional[list[Highlight]] = None


@dataclass(frozen=True)
class MatchResult:
    line: int
    cx: int
    rx: int
    length: int


class SearchEngine:
    """Keystroke-driven search over a `LineStore`, moving a `Viewport`."""

    FORWARD_KEYS = frozenset({Key.ARROW_RIGHT, Key.ARROW_DOWN})
    BACKWARD_KEYS = frozenset({Key.ARROW_LEFT, Key.ARROW_UP})
    TERMINATORS = frozenset({Key.ENTER, Key.ESCAPE})

    def __init__(self, store: LineStore, viewport: Viewport) -> None:
        self.store = store
        self.viewport = viewport
        self.state: Optional[SearchState] = None
        self._snapshot: Optional[ViewportSnapshot] = None

    @property
    def active(self) -> bool:
        return self.state is not None

    def begin(self) -> None:
        """Opens a search: remembers where to return to on cancel."""
        self._snapshot = self.viewport.snapshot()
        self.state = SearchState()
        logger.debug("Search opened at %s", self._snapshot)

    def on_key(self, query: bytes, key: int) -> Optional[MatchResult]:
        """Handles one prompt keystroke; returns the new match, if any."""
        state = self.state
        if state is None:
            logger.warning("Search keystroke %r received with no open search", key)
            return None

        self._restore_highlight(state)

        if key in self.TERMINATORS:
            self.state = None
            if key == Key.ESCAPE and self._snapshot is not None:
                self.viewport.restore(self._snapshot)
                logger.debug("Search cancelled; restored %s", self._snapshot)
            self._snapshot = None
            return None

        if key in self.FORWARD_KEYS:
            state.direction = 1
        elif key in self.BACKWARD_KEYS:
            state.direction = -1
        else:
            state.last_match = None
            state.direction = 1

        if state.last_match is None:
            state.direction = 1

        if not query:
            return None
        return self._scan(state, query)

    def _restore_highlight(self, state: SearchState) -> None:
        if state.saved_hl is None or state.saved_line is None:
            return
        if state.saved_line < len(self.store):
            line = self.store[state.saved_line]
            if len(state.saved_hl) == len(line.render):
                line.hl = state.saved_hl
        state.saved_line = None
        state.saved_hl = None

    def _scan(self, state: SearchState, query: bytes) -> Optional[MatchResult]:
        num_lines = len(self.store)
        current = state.last_match if state.last_match is not None else -1

        for _ in range(num_lines):
            current = (current + state.direction) % num_lines
            line = self.store[current]
            pos = line.render.find(query)
            if pos == -1:
                continue

            state.last_match = current
            self.viewport.cy = current
            self.viewport.cx = rx_to_cx(bytes(line.chars), pos, self.store.tab_stop)
            # Past-the-end offset makes the next scroll() put the match on top.
            self.viewport.row_offset = num_lines

            state.saved_line = current
            state.saved_hl = list(line.hl)
            end = pos + len(query)
            line.hl[pos:end] = [Highlight.SEARCH_MATCH] * (end - pos)

            logger.debug("Search %r matched line %d at rx %d", query, current, pos)
            return MatchResult(
                line=current, cx=self.viewport.cx, rx=pos, length=len(query)
            )

        logger.debug("Search %r: no match", query)
        return None
