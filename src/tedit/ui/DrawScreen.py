# tedit/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen turns the editor state into a `Frame` and paints it with curses.

It is responsible for:
- composing the visible rows as runs of ``(bytes, Highlight)`` spans,
- the ``~`` filler rows and the welcome banner on an empty buffer,
- the reverse-video status bar and the transient message bar,
- mapping `Highlight` classes to curses colour pairs from ``[colors]``,
- painting control bytes as ``@``+byte (``?`` for DEL) in reverse video,
- positioning the terminal cursor.

Composition (`compose`) has no curses dependency, so it can be inspected in
tests; only `draw` touches the terminal.
"""

import curses
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wcwidth import wcwidth

from tedit.core.Highlighter import Highlight
from tedit.utils.utils import DEFAULT_CONFIG, VERSION

if TYPE_CHECKING:
    from tedit.core.Tedit import Tedit


Span = tuple[bytes, Highlight]


@dataclass
class Frame:
    """Everything needed to paint one screen refresh."""

    rows: list[list[Span]] = field(default_factory=list)
    status_bar: str = ""
    message_bar: str = ""
    cursor: tuple[int, int] = (0, 0)


def group_spans(render: bytes, hl: list[Highlight]) -> list[Span]:
    """Splits `render` into runs of equal highlight class."""
    spans: list[Span] = []
    start = 0
    for i in range(1, len(render) + 1):
        if i == len(render) or hl[i] != hl[start]:
            spans.append((render[start:i], hl[start]))
            start = i
    return spans


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Renders the editor: text rows, status bar and message bar.

    Attributes:
        editor (Tedit): The editor whose state is rendered.
        config (dict): Editor configuration; ``[colors]`` is read here.
        stdscr (curses.window): The window painted by `draw`.
        colors (dict[Highlight, int]): curses attribute for each class.
    """

    DEFAULT_COLORS: dict[str, str] = DEFAULT_CONFIG["colors"]

    def __init__(self, editor: "Tedit", config: dict[str, Any]) -> None:
        self.editor = editor
        self.config = config
        self.stdscr = editor.stdscr
        self.colors: dict[Highlight, int] = {}
        self._init_colors()

    # ---------------------- Colours --------------------
    def _init_colors(self) -> None:
        """Creates one colour pair per highlight class, degrading to attributes."""
        self.colors = {hl: curses.A_NORMAL for hl in Highlight}

        if not curses.has_colors():
            logging.warning("Terminal has no color support. Using monochrome attributes.")
            self.colors[Highlight.COMMENT] = curses.A_DIM
            self.colors[Highlight.BLOCK_COMMENT] = curses.A_DIM
            self.colors[Highlight.KEYWORD1] = curses.A_BOLD
            self.colors[Highlight.SEARCH_MATCH] = curses.A_REVERSE
            return

        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error as exc:
            logging.warning("Color initialisation failed (%s); using defaults.", exc)

        user_colors = self.config.get("colors", {}) or {}
        for pair_id, hl in enumerate(Highlight, start=1):
            if hl == Highlight.NORMAL:
                continue
            key = hl.name.lower()
            name = str(user_colors.get(key, self.DEFAULT_COLORS[key]))
            fg = getattr(curses, f"COLOR_{name.upper()}", None)
            if not isinstance(fg, int):
                logging.warning(f"Unknown color '{name}' for '{key}'; using '{self.DEFAULT_COLORS[key]}'.")
                fg = getattr(curses, f"COLOR_{self.DEFAULT_COLORS[key].upper()}")
            try:
                curses.init_pair(pair_id, fg, -1)
                self.colors[hl] = curses.color_pair(pair_id)
            except curses.error as e:
                logging.error(f"Failed to initialize curses pair for '{key}': {e}")

    # ---------------------- Composition --------------------
    def truncate_string(self, s: str, max_width: int) -> str:
        """Return `s` clipped to visual width `max_width` (wide glyphs count twice)."""
        result: list[str] = []
        consumed = 0

        for ch in s:
            w = wcwidth(ch)
            if w < 0:
                w = 1
            if consumed + w > max_width:
                break
            result.append(ch)
            consumed += w

        return "".join(result)

    def get_string_width(self, text: str) -> int:
        width = 0
        for ch in text:
            w = wcwidth(ch)
            width += w if w >= 0 else 1
        return width

    def _compose_rows(self) -> list[list[Span]]:
        store = self.editor.store
        vp = self.editor.viewport
        rows: list[list[Span]] = []

        for y in range(vp.rows):
            filerow = y + vp.row_offset
            if filerow >= len(store):
                if len(store) == 0 and y == vp.rows // 3:
                    rows.append([(self._welcome(vp.cols), Highlight.NORMAL)])
                else:
                    rows.append([(b"~", Highlight.NORMAL)])
                continue

            line = store[filerow]
            start = min(vp.col_offset, len(line.render))
            end = start + vp.cols
            rows.append(group_spans(line.render[start:end], line.hl[start:end]))
        return rows

    @staticmethod
    def _welcome(cols: int) -> bytes:
        welcome = f"tedit -- version {VERSION}".encode("ascii")[:cols]
        padding = (cols - len(welcome)) // 2
        if padding:
            return b"~" + b" " * (padding - 1) + welcome
        return welcome

    def _compose_status_bar(self, cols: int) -> str:
        editor = self.editor
        num_lines = len(editor.store)
        name = (editor.filename or "[No Name]")[:20]
        modified = " (modified)" if editor.store.dirty else ""
        left = self.truncate_string(f"{name} - {num_lines} lines{modified}", cols)

        filetype = editor.store.syntax.name if editor.store.syntax else "no ft"
        right = f"{filetype} | {editor.viewport.cy + 1}/{num_lines}"

        left_w = self.get_string_width(left)
        right_w = self.get_string_width(right)
        if left_w + right_w <= cols:
            return left + " " * (cols - left_w - right_w) + right
        return left + " " * (cols - left_w)

    def _compose_message_bar(self, cols: int) -> str:
        editor = self.editor
        if editor.status_message and time.time() - editor.status_time < editor.status_timeout:
            return self.truncate_string(editor.status_message, cols)
        return ""

    def compose(self) -> Frame:
        """Builds the frame for the current editor state.

        The viewport must already be scrolled so the cursor is visible.
        """
        vp = self.editor.viewport
        return Frame(
            rows=self._compose_rows(),
            status_bar=self._compose_status_bar(vp.cols),
            message_bar=self._compose_message_bar(vp.cols),
            cursor=(vp.cy - vp.row_offset, vp.rx - vp.col_offset),
        )

    # ---------------------- Painting --------------------
    def _draw_span(self, y: int, x: int, data: bytes, hl: Highlight) -> None:
        attr = self.colors.get(hl, curses.A_NORMAL)
        run_start = 0
        for i, c in enumerate(data):
            if c < 32 or c == 127:
                if i > run_start:
                    self.stdscr.addstr(y, x + run_start, data[run_start:i], attr)
                symbol = "?" if c == 127 else chr(ord("@") + c)
                self.stdscr.addstr(y, x + i, symbol, curses.A_REVERSE)
                run_start = i + 1
        if run_start < len(data):
            self.stdscr.addstr(y, x + run_start, data[run_start:], attr)

    def draw(self, frame: Frame) -> None:
        """Paints `frame` and moves the terminal cursor."""
        try:
            if self.editor._force_full_redraw:
                self.stdscr.clear()
                self.editor._force_full_redraw = False
            else:
                self.stdscr.erase()

            for y, spans in enumerate(frame.rows):
                x = 0
                for data, hl in spans:
                    try:
                        self._draw_span(y, x, data, hl)
                    except curses.error:
                        pass  # bottom-right cell
                    x += len(data)

            status_y = len(frame.rows)
            try:
                self.stdscr.addstr(status_y, 0, frame.status_bar, curses.A_REVERSE)
            except curses.error:
                pass
            try:
                self.stdscr.addstr(status_y + 1, 0, frame.message_bar)
            except curses.error:
                pass

            self._position_cursor(frame.cursor)
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)

    def _position_cursor(self, cursor: tuple[int, int]) -> None:
        y, x = cursor
        try:
            self.stdscr.move(y, x)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({y}, {x}): {e}")
