# tests/conftest.py
"""Pytest configuration with shared fixtures for the tedit tests.

`curses` is replaced inside `tedit.core.Tedit` and `tedit.ui.DrawScreen` so a
real `Tedit` can be constructed and driven without a terminal. `KeyBinder`
keeps the real module: it only reads `KEY_*` constants, which need no
`initscr()`.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest

from tedit.core.Highlighter import BUILTIN_SYNTAXES, SyntaxRule
from tedit.core.Tedit import Tedit
from tedit.utils.utils import DEFAULT_CONFIG


class CursesError(Exception):
    """Minimal replacement for `curses.error` used in tests."""


def make_curses_mock() -> MagicMock:
    """Build a `curses` stand-in with real constants and a real error type."""
    curses_mock = MagicMock()
    curses_mock.error = CursesError
    constants = {
        "A_NORMAL": 0,
        "A_REVERSE": 1,
        "A_BOLD": 2,
        "A_DIM": 3,
        "COLOR_BLACK": 0,
        "COLOR_RED": 1,
        "COLOR_GREEN": 2,
        "COLOR_YELLOW": 3,
        "COLOR_BLUE": 4,
        "COLOR_MAGENTA": 5,
        "COLOR_CYAN": 6,
        "COLOR_WHITE": 7,
    }
    for name, val in constants.items():
        setattr(curses_mock, name, val)
    curses_mock.has_colors.return_value = True
    # Pair N → attribute 100 + N, so tests can tell pairs apart.
    curses_mock.color_pair.side_effect = lambda n: 100 + n
    return curses_mock


@pytest.fixture
def curses_mock() -> Generator[MagicMock, None, None]:
    """Patch `curses` in the modules that need an initialised terminal."""
    mock = make_curses_mock()
    with patch("tedit.core.Tedit.curses", mock), patch("tedit.ui.DrawScreen.curses", mock):
        yield mock


@pytest.fixture
def mock_stdscr() -> MagicMock:
    """A mocked curses window, 24x80, whose reads always time out."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    stdscr.getch.return_value = -1
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """The embedded default configuration, as `load_config` returns it."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def c_rule() -> SyntaxRule:
    return SyntaxRule.from_table("c", BUILTIN_SYNTAXES["c"])


@pytest.fixture
def python_rule() -> SyntaxRule:
    return SyntaxRule.from_table("python", BUILTIN_SYNTAXES["python"])


@pytest.fixture
def real_editor(
    mock_stdscr: MagicMock, mock_config: dict[str, Any], curses_mock: MagicMock
) -> Tedit:
    """A real `Tedit` on a mocked 24x80 window (22 text rows)."""
    return Tedit(mock_stdscr, mock_config)


@pytest.fixture
def script_keys(real_editor: Tedit):
    """Feed a fixed key sequence to the editor's input source."""

    def _script(*keys: Any) -> MagicMock:
        feeder = MagicMock(side_effect=list(keys))
        real_editor.keybinder.get_key_input = feeder
        return feeder

    return _script


@pytest.fixture
def restore_root_logging() -> Generator[None, None, None]:
    """Put back the root logger's handlers after a test reconfigures logging."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    key_logger = logging.getLogger("tedit.keyevents")
    saved_key_handlers = key_logger.handlers[:]
    saved_key_state = (key_logger.disabled, key_logger.propagate)
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    for handler in key_logger.handlers:
        if handler not in saved_key_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    key_logger.handlers = saved_key_handlers
    key_logger.disabled, key_logger.propagate = saved_key_state
