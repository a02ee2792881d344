# tedit/core/Renderer.py
"""tedit.core.Renderer
=====================

Tab expansion and column mapping for a single line.

A line keeps its raw bytes (what is written to disk) and a derived render
buffer (what is shown on screen). The only transformation between the two is
tab expansion: every tab advances the display column to the next multiple of
the tab stop, always producing at least one space. Every other byte occupies
exactly one display cell.

Two coordinates are therefore in use everywhere in the editor:

- ``cx``: logical column, an index into the raw bytes.
- ``rx``: display column, an index into the render bytes.
"""

DEFAULT_TAB_STOP = 8

_TAB = 0x09
_SPACE = b" "


def _advance(rx: int, byte: int, tab_stop: int) -> int:
    """Return the display column following `byte` when it starts at `rx`."""
    if byte == _TAB:
        return rx + (tab_stop - 1) - (rx % tab_stop) + 1
    return rx + 1


def render(raw: bytes, tab_stop: int = DEFAULT_TAB_STOP) -> bytes:
    """Expand tabs in `raw` and return the display bytes."""
    if _TAB not in raw:
        return bytes(raw)

    out = bytearray()
    for byte in raw:
        if byte == _TAB:
            out += _SPACE
            while len(out) % tab_stop:
                out += _SPACE
        else:
            out.append(byte)
    return bytes(out)


def cx_to_rx(raw: bytes, cx: int, tab_stop: int = DEFAULT_TAB_STOP) -> int:
    """Map logical column `cx` to its display column."""
    rx = 0
    for byte in raw[:cx]:
        rx = _advance(rx, byte, tab_stop)
    return rx


def rx_to_cx(raw: bytes, rx: int, tab_stop: int = DEFAULT_TAB_STOP) -> int:
    """Map display column `rx` back to a logical column.

    Returns the first ``cx`` whose cumulative width strictly exceeds `rx`, so a
    display column that lands inside an expanded tab snaps to that tab. When no
    byte reaches past `rx` the append position ``len(raw)`` is returned.
    """
    cur_rx = 0
    for cx, byte in enumerate(raw):
        cur_rx = _advance(cur_rx, byte, tab_stop)
        if cur_rx > rx:
            return cx
    return len(raw)
