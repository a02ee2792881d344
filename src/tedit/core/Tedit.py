# tedit/core/Tedit.py
"""tedit.core.Tedit.py
============================
Tedit: the editor state object and its control loop.

The Tedit class owns every piece of editor state (the line store, the
cursor/viewport, the search engine, the current filename and the status
message) and runs the single-threaded loop: draw a frame, wait up to 100 ms
for one key, apply it, repeat.

Responsibilities:

- Opening a buffer from lines and selecting its syntax rule by filename.
- Key dispatch through the KeyBinder (editing, movement, paging).
- Saving, with a "Save as" prompt for unnamed buffers.
- The quit confirmation for modified buffers.
- The single-line prompt used by save-as and incremental search.

Everything that touches the terminal is delegated: input decoding to
`KeyBinder`, painting to `DrawScreen`.
"""

import curses
import logging
import os
import time
from typing import Any, Callable, Optional

from tedit.core.FileIO import load_lines, save_lines
from tedit.core.Highlighter import SyntaxRule, build_syntax_db, select_syntax
from tedit.core.Keys import Key, ctrl_key
from tedit.core.LineStore import LineStore
from tedit.core.Search import SearchEngine
from tedit.core.Viewport import Viewport
from tedit.ui.DrawScreen import DrawScreen
from tedit.ui.KeyBinder import KeyBinder
from tedit.utils.utils import editor_settings

logger = logging.getLogger("tedit")

PromptCallback = Callable[[bytes, int], Any]


class Tedit:
    """Class Tedit
    =========================
    The terminal editor: state plus the actions bound to keys.

    Attributes:
        stdscr (curses.window): The main curses window.
        config (dict): Merged configuration (defaults + user config.toml).
        store (LineStore): The text buffer.
        viewport (Viewport): Cursor position and scroll offsets.
        search (SearchEngine): Incremental search over `store`.
        syntaxes (list[SyntaxRule]): Rules a filename is matched against.
        filename (Optional[str]): Path of the buffer, None until saved.
        status_message (str): Text shown in the message bar.
        status_time (float): When `status_message` was set (epoch seconds).
        running (bool): Cleared to stop `run()`.
    """

    SEARCH_PROMPT = "Search: %s (Use ESC/Arrows/Enter)"
    SAVE_AS_PROMPT = "Save as: %s (ESC to cancel)"

    def _set_status_message(self, message: str) -> None:
        """Sets the message bar text and restarts its display timer."""
        if self.status_message != message:
            logging.debug(f"Status message set to: '{message}'")
        self.status_message = message
        self.status_time = time.time()

    # -- Initialization and Setup ---
    def __init__(
        self,
        stdscr: "curses.window",
        config: dict[str, Any],
        syntaxes: Optional[list[SyntaxRule]] = None,
    ) -> None:
        """Creates the editor. Builds the syntax table from `config` unless
        `syntaxes` is given (a malformed table raises SyntaxConfigError)."""
        self.stdscr = stdscr
        self.config: dict[str, Any] = config

        self._initialize_state()
        self._initialize_components(syntaxes)
        self._setup_environment()

        self.handle_resize()
        logging.info("Tedit initialized (tab_stop=%d).", self.store.tab_stop)

    def _initialize_state(self) -> None:
        settings = editor_settings(self.config)
        self.filename: Optional[str] = None
        self.status_message: str = ""
        self.status_time: float = 0.0
        self.status_timeout: float = settings["status_timeout"]
        self.quit_times: int = settings["quit_times"]
        self.quit_times_left: int = self.quit_times
        self.running: bool = False
        self._force_full_redraw: bool = False
        self._tab_stop: int = settings["tab_stop"]

    def _initialize_components(self, syntaxes: Optional[list[SyntaxRule]]) -> None:
        self.syntaxes: list[SyntaxRule] = (
            syntaxes if syntaxes is not None else build_syntax_db(self.config)
        )
        self.store = LineStore(tab_stop=self._tab_stop)
        self.viewport = Viewport()
        self.search = SearchEngine(self.store, self.viewport)
        self.drawer = DrawScreen(self, self.config)

        # KeyBinder binds editor methods, so it comes last.
        self.keybinder = KeyBinder(self)

    def _setup_environment(self) -> None:
        """Raw input, no echo, keypad decoding and a visible cursor."""
        try:
            self.stdscr.keypad(True)
            curses.raw()
            curses.noecho()
            curses.curs_set(1)
        except curses.error as exc:
            logging.warning("Could not configure terminal modes: %s", exc)

    def close(self) -> None:
        """Releases the buffer on orderly shutdown."""
        self.store.clear()
        logging.info("Editor buffer released.")

    # --- Buffer ---
    def open_lines(self, filename: Optional[str], lines: list[bytes]) -> None:
        """Replaces the buffer with `lines` and selects the syntax for `filename`."""
        self.filename = filename
        self.store.load(lines)
        self.store.set_syntax(select_syntax(filename, self.syntaxes))
        self.store.dirty = 0
        self.viewport.cx = self.viewport.cy = 0
        self.viewport.row_offset = self.viewport.col_offset = 0
        logger.info(f"Opened '{filename}' with {len(self.store)} lines")

    def open_file(self, filename: str) -> None:
        """Loads `filename` from disk. Raises FileLoadError on failure."""
        self.open_lines(filename, load_lines(filename))

    # --- Main loop ---
    def refresh_screen(self) -> None:
        self.viewport.scroll(self.store)
        self.drawer.draw(self.drawer.compose())

    def run(self) -> None:
        """Runs until `running` is cleared by `exit_editor`.

        KeyboardInterrupt ends the loop; any other unhandled exception is
        logged as critical and ends it too.
        """
        logger.info("Editor main loop started.")
        self.running = True
        self.stdscr.timeout(KeyBinder.INPUT_TIMEOUT_MS)

        while self.running:
            try:
                self.refresh_screen()
                self.process_keypress(self.keybinder.get_key_input())
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.running = False
            except Exception as e:
                logger.critical("Unhandled exception in main loop: %s", e, exc_info=True)
                self.running = False

        logger.info("Editor main loop finished.")

    def process_keypress(self, key: Optional[int]) -> None:
        """Applies one key. Any key other than quit re-arms the quit confirmation."""
        if key is None:
            return
        handled_by = self.keybinder.handle_input(key)
        if handled_by != "exit_editor":
            self.quit_times_left = self.quit_times

    # --- Actions ---
    def exit_editor(self) -> None:
        """Stops the loop, asking for extra presses when the buffer is modified."""
        if self.store.dirty and self.quit_times_left > 0:
            self._set_status_message(
                f"WARNING!!! File has unsaved changes. Press "
                f"{self.keybinder.key_label('quit')} {self.quit_times_left} more times to quit."
            )
            self.quit_times_left -= 1
            return
        self.running = False
        logger.info("Main loop stop signaled.")

    def save_file(self) -> None:
        """Writes the buffer; errors become a status message, never an exception."""
        if self.filename is None:
            answer = self.prompt(self.SAVE_AS_PROMPT)
            if answer is None:
                self._set_status_message("Save aborted")
                return
            self.filename = os.fsdecode(answer)
            self.store.set_syntax(select_syntax(self.filename, self.syntaxes))

        try:
            written = save_lines(self.filename, self.store.to_lines())
        except OSError as e:
            logger.error(f"Save to '{self.filename}' failed: {e}")
            self._set_status_message(f"Can't save! I/O error: {e.strerror or e}")
            return

        self.store.dirty = 0
        self._set_status_message(f"{written} bytes written to disk")

    def find(self) -> None:
        """Incremental search; Escape returns the cursor to where it was."""
        self.search.begin()
        query = self.prompt(self.SEARCH_PROMPT, self.search.on_key)
        logger.debug(f"Search prompt closed with query {query!r}")

    def insert_char(self, byte: int) -> None:
        self.store.insert_char(self.viewport.cy, self.viewport.cx, byte)
        self.viewport.cx += 1

    def handle_enter(self) -> None:
        self.store.insert_newline(self.viewport.cy, self.viewport.cx)
        self.viewport.cy += 1
        self.viewport.cx = 0

    def handle_backspace(self) -> None:
        new_pos = self.store.delete_char(self.viewport.cy, self.viewport.cx)
        if new_pos is not None:
            self.viewport.cy, self.viewport.cx = new_pos

    def handle_delete(self) -> None:
        """Deletes the byte under the cursor (or joins the next line)."""
        self.viewport.move_cursor(self.store, Key.ARROW_RIGHT)
        self.handle_backspace()

    def handle_home(self) -> None:
        self.viewport.cx = 0

    def handle_end(self) -> None:
        line = self.viewport.current_line(self.store)
        if line is not None:
            self.viewport.cx = line.size

    def handle_page_up(self) -> None:
        self.viewport.cy = self.viewport.row_offset
        for _ in range(self.viewport.rows):
            self.viewport.move_cursor(self.store, Key.ARROW_UP)

    def handle_page_down(self) -> None:
        vp = self.viewport
        vp.cy = min(vp.row_offset + vp.rows - 1, len(self.store))
        vp.clamp_cx(self.store)
        for _ in range(vp.rows):
            vp.move_cursor(self.store, Key.ARROW_DOWN)

    def handle_up(self) -> None:
        self.viewport.move_cursor(self.store, Key.ARROW_UP)

    def handle_down(self) -> None:
        self.viewport.move_cursor(self.store, Key.ARROW_DOWN)

    def handle_left(self) -> None:
        self.viewport.move_cursor(self.store, Key.ARROW_LEFT)

    def handle_right(self) -> None:
        self.viewport.move_cursor(self.store, Key.ARROW_RIGHT)

    def handle_resize(self) -> None:
        """Re-reads the window size; two rows are kept for the status bars."""
        height, width = self.stdscr.getmaxyx()
        self.viewport.resize(max(0, height - 2), width)
        self._force_full_redraw = True

    def handle_refresh(self) -> None:
        self._force_full_redraw = True

    def handle_escape(self) -> None:
        logging.debug("Escape outside a prompt ignored.")

    # --- Prompt ---
    def prompt(self, template: str, callback: Optional[PromptCallback] = None) -> Optional[bytes]:
        """Reads a line of input in the message bar.

        `template` contains ``%s``, replaced by the text typed so far. The
        callback, if any, is called with ``(query, key)`` after every key,
        including the Enter or Escape that closes the prompt.

        Returns:
            The entered bytes, or None if the prompt was cancelled with Escape.
        """
        buf = bytearray()
        while True:
            self._set_status_message(template.replace("%s", buf.decode("utf-8", "replace"), 1))
            self.refresh_screen()

            key = self.keybinder.get_key_input()
            if key is None:
                continue
            if key == Key.RESIZE:
                self.handle_resize()
                continue

            if key in (Key.BACKSPACE, ctrl_key("h"), Key.DELETE):
                if buf:
                    del buf[-1]
            elif key == Key.ESCAPE:
                self._set_status_message("")
                if callback:
                    callback(bytes(buf), key)
                return None
            elif key == Key.ENTER:
                if not buf:
                    continue
                self._set_status_message("")
                if callback:
                    callback(bytes(buf), key)
                return bytes(buf)
            elif 32 <= key < 127:
                buf.append(key)

            if callback:
                callback(bytes(buf), key)
