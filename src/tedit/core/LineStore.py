# tedit/core/LineStore.py
"""tedit.core.LineStore
======================

The in-memory text buffer: an ordered list of `Line` objects plus the edit
operations that mutate it.

Every line owns three representations that must stay consistent:

1. ``chars``  - the raw bytes (what is saved to disk),
2. ``render`` - the display bytes after tab expansion (`Renderer.render`),
3. ``hl``     - one `Highlight` tag per render byte (`Highlighter.highlight_line`).

Any mutation of ``chars`` goes through `LineStore.update_row`, which rebuilds
``render`` and ``hl`` and then walks forward re-highlighting following lines
for as long as the carried block-comment state keeps changing. The walk is a
loop, not recursion, so a comment opened at the top of a very large file
cannot exhaust the interpreter stack.

Row and column arguments outside the buffer are clamped or ignored; no
mutator raises for a bad position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from tedit.core.Highlighter import Highlight, SyntaxRule, highlight_line
from tedit.core.Renderer import DEFAULT_TAB_STOP, render

logger = logging.getLogger("tedit")


@dataclass(eq=False)
class Line:
    """One row of text with its derived render and highlight buffers."""

    idx: int
    chars: bytearray
    render: bytes = b""
    hl: list[Highlight] = field(default_factory=list)
    hl_open_comment: bool = False

    @property
    def size(self) -> int:
        return len(self.chars)

    def release(self) -> None:
        self.chars = bytearray()
        self.render = b""
        self.hl = []


class LineStore:
    """Ordered sequence of lines with render/highlight kept in sync.

    Attributes:
        lines (list[Line]): The rows, ``lines[i].idx == i`` at all times.
        tab_stop (int): Tab stop used by the render transform.
        syntax (Optional[SyntaxRule]): Active rule, None for plain text.
        dirty (int): Modification counter, bumped by every mutator.
    """

    def __init__(
        self, tab_stop: int = DEFAULT_TAB_STOP, syntax: Optional[SyntaxRule] = None
    ) -> None:
        self.lines: list[Line] = []
        self.tab_stop = tab_stop
        self.syntax = syntax
        self.dirty = 0

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, idx: int) -> Line:
        return self.lines[idx]

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    @property
    def num_lines(self) -> int:
        return len(self.lines)

    # ---------------- Bulk operations ----------------
    def load(self, contents: Iterable[bytes]) -> None:
        """Replaces the buffer with `contents` and marks it clean."""
        self.clear()
        for data in contents:
            self.insert_line(len(self.lines), data)
        self.dirty = 0
        logger.debug("LineStore loaded %d lines", len(self.lines))

    def clear(self) -> None:
        for line in self.lines:
            line.release()
        self.lines = []

    def to_lines(self) -> list[bytes]:
        return [bytes(line.chars) for line in self.lines]

    def set_syntax(self, rule: Optional[SyntaxRule]) -> None:
        """Activates `rule` and re-highlights every line from the top."""
        self.syntax = rule
        in_comment = False
        for line in self.lines:
            line.hl, line.hl_open_comment = highlight_line(
                line.render, self.syntax, in_comment
            )
            in_comment = line.hl_open_comment
        logger.debug(
            "Syntax set to %s; recomputed %d lines",
            rule.name if rule else None,
            len(self.lines),
        )

    # ---------------- Derived buffers ----------------
    def _carry_into(self, idx: int) -> bool:
        """Block-comment state entering line `idx`."""
        return idx > 0 and self.lines[idx - 1].hl_open_comment

    def update_row(self, line: Line) -> None:
        """Rebuilds the render buffer of `line`, then its highlighting."""
        line.render = render(bytes(line.chars), self.tab_stop)
        self.update_syntax(line.idx)

    def update_syntax(self, idx: int) -> None:
        """Re-highlights line `idx` and every following line whose carried-in
        comment state changed as a result."""
        while 0 <= idx < len(self.lines):
            line = self.lines[idx]
            old_carry = line.hl_open_comment
            line.hl, line.hl_open_comment = highlight_line(
                line.render, self.syntax, self._carry_into(idx)
            )
            if line.hl_open_comment == old_carry:
                break
            idx += 1

    # ---------------- Line operations ----------------
    def insert_line(self, at: int, data: bytes = b"") -> None:
        """Inserts a new line holding `data` before index `at`."""
        if at < 0 or at > len(self.lines):
            return

        line = Line(idx=at, chars=bytearray(data))
        self.lines.insert(at, line)
        for j in range(at + 1, len(self.lines)):
            self.lines[j].idx += 1

        # The line now at at+1 was highlighted with the carry the new line
        # receives, so that is the value to compare against.
        line.hl_open_comment = self._carry_into(at)
        self.update_row(line)
        self.dirty += 1

    def delete_line(self, at: int) -> None:
        """Removes the line at index `at`."""
        if at < 0 or at >= len(self.lines):
            return

        removed = self.lines.pop(at)
        for j in range(at, len(self.lines)):
            self.lines[j].idx -= 1

        # The successor was highlighted with the removed line's carry.
        if at < len(self.lines) and removed.hl_open_comment != self._carry_into(at):
            self.update_syntax(at)
        removed.release()
        self.dirty += 1

    # ---------------- Row operations ----------------
    def row_insert_char(self, line: Line, at: int, byte: int) -> None:
        if at < 0 or at > line.size:
            at = line.size
        line.chars.insert(at, byte)
        self.update_row(line)
        self.dirty += 1

    def row_append_bytes(self, line: Line, data: bytes) -> None:
        line.chars += data
        self.update_row(line)
        self.dirty += 1

    def row_delete_char(self, line: Line, at: int) -> None:
        if at < 0 or at >= line.size:
            return
        del line.chars[at]
        self.update_row(line)
        self.dirty += 1

    # ---------------- Edit operations ----------------
    def insert_char(self, row: int, col: int, byte: int) -> None:
        """Inserts `byte` at (`row`, `col`); `row == num_lines` appends a line."""
        if row == len(self.lines):
            self.insert_line(len(self.lines), b"")
        if row < 0 or row >= len(self.lines):
            return
        line = self.lines[row]
        col = max(0, min(col, line.size))
        self.row_insert_char(line, col, byte)

    def delete_char(self, row: int, col: int) -> Optional[tuple[int, int]]:
        """Deletes the byte left of (`row`, `col`), joining lines at column 0.

        Returns:
            The cursor position after the deletion, or None when nothing was
            deleted (document start, virtual row, or out of range).
        """
        if row < 0 or row >= len(self.lines):
            return None
        if row == 0 and col <= 0:
            return None

        line = self.lines[row]
        col = min(col, line.size)
        if col > 0:
            self.row_delete_char(line, col - 1)
            return row, col - 1

        prev = self.lines[row - 1]
        join_at = prev.size
        self.row_append_bytes(prev, bytes(line.chars))
        self.delete_line(row)
        logger.debug("Joined line %d onto %d at column %d", row, row - 1, join_at)
        return row - 1, join_at

    def insert_newline(self, row: int, col: int) -> None:
        """Splits line `row` at `col`; column 0 inserts an empty line above."""
        if row < 0 or row > len(self.lines):
            return
        if row == len(self.lines):
            col = 0
        else:
            col = max(0, min(col, self.lines[row].size))

        if col == 0:
            self.insert_line(row, b"")
            return

        line = self.lines[row]
        self.insert_line(row + 1, bytes(line.chars[col:]))
        del line.chars[col:]
        self.update_row(line)
        self.dirty += 1
