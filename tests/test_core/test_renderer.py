# tests/test_core/test_renderer.py
"""
Tests for tab expansion and cx/rx mapping
==========================================

Covers `render`, `cx_to_rx` and `rx_to_cx` from `tedit.core.Renderer`,
including display columns that land inside an expanded tab.
"""

import pytest

from tedit.core.Renderer import cx_to_rx, render, rx_to_cx


@pytest.mark.parametrize(
    "raw, tab_stop, expected",
    [
        (b"abc", 8, b"abc"),
        (b"\t", 8, b" " * 8),
        (b"a\tb", 8, b"a" + b" " * 7 + b"b"),
        (b"12345678\t", 8, b"12345678" + b" " * 8),
        (b"ab\tc", 4, b"ab  c"),
        (b"", 8, b""),
    ],
)
def test_render_expands_tabs_to_next_stop(raw: bytes, tab_stop: int, expected: bytes) -> None:
    """A tab always yields at least one space and ends on a multiple of the stop."""
    assert render(raw, tab_stop) == expected


def test_render_leaves_control_bytes_alone() -> None:
    assert render(b"a\x01\x7fb") == b"a\x01\x7fb"


def test_cx_to_rx_counts_tab_width() -> None:
    raw = b"a\tb"
    assert [cx_to_rx(raw, cx) for cx in range(4)] == [0, 1, 8, 9]


def test_rx_to_cx_inverts_cx_to_rx() -> None:
    """Every logical column survives a cx → rx → cx round trip."""
    raw = b"\tx\ty z"
    for cx in range(len(raw) + 1):
        assert rx_to_cx(raw, cx_to_rx(raw, cx)) == cx


@pytest.mark.parametrize("rx", [1, 4, 7])
def test_rx_inside_tab_snaps_to_the_tab(rx: int) -> None:
    assert rx_to_cx(b"a\tb", rx) == 1


def test_rx_past_end_returns_append_position() -> None:
    assert rx_to_cx(b"a\tb", 9) == 3
    assert rx_to_cx(b"a\tb", 50) == 3


def test_custom_tab_stop_is_honoured() -> None:
    assert cx_to_rx(b"\t\t", 2, tab_stop=4) == 8
    assert rx_to_cx(b"\t\t", 5, tab_stop=4) == 1
