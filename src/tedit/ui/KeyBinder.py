# tedit/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class sits between the terminal and the editor. It reads raw
input from curses, decodes it into one logical key (a byte ``0..255`` or a
`Key` member), and dispatches that key to the matching `Tedit` action.

Key Features:
- Translates curses keypad codes (`KEY_UP`, `KEY_DC`, `KEY_NPAGE`, ...) to `Key`.
- Decodes raw escape sequences that curses did not translate itself, through
  `ESCAPE_SEQUENCE_MAP`. Only ``ESC [3~`` is Delete; ``ESC [2~`` (Insert) is
  not bound and decodes as a lone Escape.
- Loads the rebindable actions (quit, save, find) from ``[keybindings]``.
- Traces every decoded key to the ``tedit.keyevents`` logger.

Main Methods:
1. get_key_input: Reads one logical key, or None when the read timed out.
2. handle_input: Runs the action bound to a key, or inserts a printable byte.
3. help_text: The one-line key summary shown at startup, from the bindings.
"""

import curses
import logging
from typing import TYPE_CHECKING, Callable, Optional

from tedit.core.Keys import TAB, Key, ctrl_key

if TYPE_CHECKING:
    from tedit.core.Tedit import Tedit


KEY_LOGGER = logging.getLogger("tedit.keyevents")


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Decodes terminal input into logical keys and maps keys to editor actions.

    Attributes:
        editor (Tedit): The editor whose actions are dispatched.
        config (dict): Editor configuration, read for ``[keybindings]``.
        stdscr: The curses window input is read from.
        keybindings (dict[str, int]): Rebindable action name to key code.
        action_map (dict[int, Callable]): Key code to bound editor method.
    """
    # Keys do NOT include the leading ESC (0x1B); get_key_input() consumes it.
    ESCAPE_SEQUENCE_MAP: dict[str, Key] = {
        # Arrows (CSI and SS3)
        "[A": Key.ARROW_UP, "[B": Key.ARROW_DOWN,
        "[C": Key.ARROW_RIGHT, "[D": Key.ARROW_LEFT,
        "OA": Key.ARROW_UP, "OB": Key.ARROW_DOWN,
        "OC": Key.ARROW_RIGHT, "OD": Key.ARROW_LEFT,

        # Home/End (CSI/SS3 and tilde variants)
        "[H": Key.HOME, "[F": Key.END, "OH": Key.HOME, "OF": Key.END,
        "[1~": Key.HOME, "[7~": Key.HOME,
        "[4~": Key.END, "[8~": Key.END,

        # Delete/PageUp/PageDown (~ style)
        "[3~": Key.DELETE, "[5~": Key.PAGE_UP, "[6~": Key.PAGE_DOWN,
    }

    # getch() timeout while waiting for the next key, in milliseconds.
    INPUT_TIMEOUT_MS = 100

    DEFAULT_KEYBINDINGS: dict[str, str] = {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "find": "ctrl+f",
    }

    def __init__(self, editor: "Tedit") -> None:
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config
        self.stdscr = editor.stdscr

        self.curses_key_map = self._build_curses_key_map()
        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    @staticmethod
    def _build_curses_key_map() -> dict[int, Key]:
        """Keypad codes curses already decoded, mapped to logical keys."""
        key_map: dict[int, Key] = {
            curses.KEY_UP: Key.ARROW_UP,
            curses.KEY_DOWN: Key.ARROW_DOWN,
            curses.KEY_LEFT: Key.ARROW_LEFT,
            curses.KEY_RIGHT: Key.ARROW_RIGHT,
            curses.KEY_HOME: Key.HOME,
            getattr(curses, "KEY_END", curses.KEY_LL): Key.END,
            curses.KEY_PPAGE: Key.PAGE_UP,
            curses.KEY_NPAGE: Key.PAGE_DOWN,
            curses.KEY_DC: Key.DELETE,
            curses.KEY_BACKSPACE: Key.BACKSPACE,
            curses.KEY_ENTER: Key.ENTER,
            curses.KEY_RESIZE: Key.RESIZE,
        }
        return key_map

    # ---------------------- Keybindings --------------------
    def _decode_keystring(self, key_input: "str | int") -> int:
        """Decodes ``"ctrl+<letter>"``, a single character, or an int code.

        Raises:
            ValueError: If the specification cannot be decoded.
        """
        if isinstance(key_input, bool) or not isinstance(key_input, (str, int)):
            raise ValueError(f"Invalid key specification type: {type(key_input).__name__}")
        if isinstance(key_input, int):
            return key_input

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        parts = s.split("+")
        if len(parts) == 1 and len(s) == 1:
            return ord(s)
        if len(parts) == 2 and parts[0] == "ctrl" and len(parts[1]) == 1 and parts[1].isalpha():
            return ctrl_key(parts[1])
        raise ValueError(f"Unsupported key specification '{key_input}'")

    def _load_keybindings(self) -> dict[str, int]:
        """Resolves the rebindable actions; bad user entries fall back to defaults."""
        user_keybindings = self.config.get("keybindings", {}) or {}
        parsed: dict[str, int] = {}

        for action, default_spec in self.DEFAULT_KEYBINDINGS.items():
            spec = user_keybindings.get(action, default_spec)
            try:
                parsed[action] = self._decode_keystring(spec)
            except ValueError as e:
                logging.error(
                    "Error parsing keybinding %r for action %r: %s. Using default %r.",
                    spec, action, e, default_spec,
                )
                parsed[action] = self._decode_keystring(default_spec)

        logging.debug("Loaded keybindings (action -> key code): %s", parsed)
        return parsed

    def _setup_action_map(self) -> dict[int, Callable[[], None]]:
        """Builds the key code → editor method table."""
        editor = self.editor
        action_to_method_map: dict[str, Callable[[], None]] = {
            "quit": editor.exit_editor,
            "save_file": editor.save_file,
            "find": editor.find,
        }

        final_key_action_map: dict[int, Callable[[], None]] = {
            Key.ENTER: editor.handle_enter,
            Key.BACKSPACE: editor.handle_backspace,
            ctrl_key("h"): editor.handle_backspace,
            Key.DELETE: editor.handle_delete,
            Key.HOME: editor.handle_home,
            Key.END: editor.handle_end,
            Key.PAGE_UP: editor.handle_page_up,
            Key.PAGE_DOWN: editor.handle_page_down,
            Key.ARROW_UP: editor.handle_up,
            Key.ARROW_DOWN: editor.handle_down,
            Key.ARROW_LEFT: editor.handle_left,
            Key.ARROW_RIGHT: editor.handle_right,
            Key.RESIZE: editor.handle_resize,
            ctrl_key("l"): editor.handle_refresh,
            Key.ESCAPE: editor.handle_escape,
        }

        for action_name, key_code in self.keybindings.items():
            method_callable = action_to_method_map[action_name]
            if key_code in final_key_action_map:
                logging.warning(
                    f"Keybinding for action '{action_name}' (key: {key_code}) is overwriting "
                    f"an existing mapping for method '{final_key_action_map[key_code].__name__}'."
                )
            final_key_action_map[key_code] = method_callable

        final_map_log_str = {k: v.__name__ for k, v in final_key_action_map.items()}
        logging.debug(f"Final constructed action map: {final_map_log_str}")
        return final_key_action_map

    # ---------------------- Handle Input --------------------
    def handle_input(self, key: int) -> Optional[str]:
        """Runs the action bound to `key`.

        Unbound bytes >= 32 (except 127) and Tab are inserted into the buffer;
        other unbound control codes are ignored.

        Returns:
            The name of the method that handled the key, or None if ignored.
        """
        action = self.action_map.get(key)
        if action is not None:
            logging.debug("handle_input: key %r -> %s", key, action.__name__)
            action()
            return action.__name__

        if key == TAB or (32 <= key <= 255 and key != Key.BACKSPACE):
            self.editor.insert_char(key)
            return "insert_char"

        logging.debug("handle_input: ignored control key %r", key)
        return None

    def key_label(self, action: str) -> str:
        """Human-readable key for `action`, e.g. ``"Ctrl-Q"``."""
        code = self.keybindings.get(action)
        if code is None:
            return "?"
        if code < 32:
            return f"Ctrl-{chr(code + 64)}"
        return chr(code) if code < 256 else str(code)

    def help_text(self) -> str:
        """Startup hint naming the keys currently bound to save, quit and find."""
        return (
            f"HELP: {self.key_label('save_file')} = save | "
            f"{self.key_label('quit')} = quit | "
            f"{self.key_label('find')} = find"
        )

    # ---------------------- Read Input --------------------
    def get_key_input(self) -> Optional[int]:
        """Reads one logical key, honouring the window's timeout.

        Returns:
            A byte (``0..255``) or `Key` member, or None when the read timed
            out or produced a code with no logical meaning.
        """
        target = self.stdscr

        try:
            ch = target.getch()
        except curses.error:
            return None

        if ch == -1:
            return None

        if ch == Key.ESCAPE:
            key: Optional[int] = self._read_escape_sequence(target)
        elif ch in self.curses_key_map:
            key = self.curses_key_map[ch]
        elif ch == 10:
            key = Key.ENTER
        elif 0 <= ch <= 255:
            key = ch
        else:
            logging.debug("get_key_input: unmapped curses code %r", ch)
            key = None

        KEY_LOGGER.debug("raw=%r key=%r", ch, key)
        return key

    def _read_escape_sequence(self, target: "curses.window") -> int:
        """Reads the rest of an escape sequence without blocking and decodes it."""
        seq = ""
        target.timeout(0)
        try:
            while True:
                nx = target.getch()
                if nx == -1:
                    break
                if 0 <= nx <= 255:
                    seq += chr(nx)
                else:
                    seq += f"<{nx}>"
        finally:
            target.timeout(self.INPUT_TIMEOUT_MS)

        if not seq:
            logging.debug("get_key_input: standalone ESC")
            return Key.ESCAPE

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if mapped is not None:
            logging.debug("get_key_input: ESC %r -> %r", seq, mapped)
            return mapped

        logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
        return Key.ESCAPE
