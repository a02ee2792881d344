# tedit/core/Keys.py
"""Logical key codes shared by the input layer and the editor core.

Raw bytes (0..255) travel through the editor unchanged; named keys that have
no single-byte encoding are numbered from 1000 upward so they can never be
confused with a byte.
"""

from enum import IntEnum


class Key(IntEnum):
    """Named keys produced by the KeyBinder."""

    ENTER = 13
    ESCAPE = 27
    BACKSPACE = 127

    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    DELETE = 1004
    HOME = 1005
    END = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008
    RESIZE = 1009


def ctrl_key(ch: str) -> int:
    """Return the control code for `ch` (e.g. ``ctrl_key("q") == 17``)."""
    return ord(ch) & 0x1F


TAB = 9
