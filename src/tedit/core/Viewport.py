# tedit/core/Viewport.py
"""Cursor position and scroll offsets over a `LineStore`."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tedit.core.Keys import Key
from tedit.core.LineStore import Line, LineStore
from tedit.core.Renderer import cx_to_rx

logger = logging.getLogger("tedit")


@dataclass(frozen=True)
class ViewportSnapshot:
    cx: int
    cy: int
    row_offset: int
    col_offset: int


class Viewport:
    """Logical cursor (`cx`, `cy`), its display column `rx`, and the
    row/column offsets of the visible window.

    `cy` may equal the number of lines: that is the virtual row past the end
    of the buffer, where `cx` is always 0.
    """

    def __init__(self, rows: int = 0, cols: int = 0) -> None:
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.row_offset = 0
        self.col_offset = 0
        self.rows = max(0, rows)
        self.cols = max(0, cols)

    def resize(self, rows: int, cols: int) -> None:
        self.rows = max(0, rows)
        self.cols = max(0, cols)
        logger.debug("Viewport resized to %dx%d", self.rows, self.cols)

    def current_line(self, store: LineStore) -> Optional[Line]:
        if 0 <= self.cy < len(store):
            return store[self.cy]
        return None

    def snapshot(self) -> ViewportSnapshot:
        return ViewportSnapshot(self.cx, self.cy, self.row_offset, self.col_offset)

    def restore(self, snap: ViewportSnapshot) -> None:
        self.cx = snap.cx
        self.cy = snap.cy
        self.row_offset = snap.row_offset
        self.col_offset = snap.col_offset

    def scroll(self, store: LineStore) -> None:
        """Recomputes `rx` and shifts the offsets so the cursor is visible."""
        line = self.current_line(store)
        self.rx = cx_to_rx(bytes(line.chars), self.cx, store.tab_stop) if line else 0

        if self.cy < self.row_offset:
            self.row_offset = self.cy
        if self.cy >= self.row_offset + self.rows:
            self.row_offset = self.cy - self.rows + 1
        if self.rx < self.col_offset:
            self.col_offset = self.rx
        if self.rx >= self.col_offset + self.cols:
            self.col_offset = self.rx - self.cols + 1

    def move_cursor(self, store: LineStore, key: int) -> None:
        """Moves the cursor one step for an arrow key."""
        line = self.current_line(store)

        if key == Key.ARROW_LEFT:
            if self.cx > 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = store[self.cy].size
        elif key == Key.ARROW_RIGHT:
            if line is not None and self.cx < line.size:
                self.cx += 1
            elif line is not None and self.cx == line.size:
                self.cy += 1
                self.cx = 0
        elif key == Key.ARROW_UP:
            if self.cy > 0:
                self.cy -= 1
        elif key == Key.ARROW_DOWN:
            if self.cy < len(store):
                self.cy += 1

        self.clamp_cx(store)

    def clamp_cx(self, store: LineStore) -> None:
        """Pulls `cx` back to the end of the current line (0 on the virtual row)."""
        line = self.current_line(store)
        row_len = line.size if line else 0
        if self.cx > row_len:
            self.cx = row_len
