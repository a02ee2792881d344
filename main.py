#!/usr/bin/env python3
# /tedit/main.py
"""
tedit Main Entry Point
======================

This script is the primary entry point for launching the tedit editor. It performs:
1) Path Setup: ensures the tedit package is importable from a source checkout.
2) Configuration & Logging: loads config and initializes logging ASAP.
3) Syntax table: builds the rule table; a malformed table is fatal.
4) File loading: reads the file named on the command line; failure is fatal.
5) Curses Wrapper: safely initializes/tears down curses around the editor loop.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import sys
from typing import Any, Optional

# --- Step 1: Set up the Python Path ---
project_src = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if project_src not in sys.path:
    sys.path.insert(0, project_src)

# --- Step 2: Immediate Logging and Configuration Setup ---
try:
    from tedit.utils.logging_config import setup_logging
    from tedit.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("tedit")
except Exception as e:
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

from tedit.core.FileIO import FileLoadError, load_lines  # noqa: E402
from tedit.core.Highlighter import SyntaxConfigError, SyntaxRule, build_syntax_db  # noqa: E402
from tedit.core.Tedit import Tedit  # noqa: E402


def main_app_runner(
    stdscr: "curses.window",
    config: dict[str, Any],
    syntaxes: list[SyntaxRule],
    filename: Optional[str],
    lines: list[bytes],
) -> None:
    """
    Target for `curses.wrapper`. Builds the editor and runs its loop.

    Args:
        stdscr: Curses standard screen window provided by wrapper.
        config: Application configuration dict.
        syntaxes: Validated syntax rule table.
        filename: File named on the command line, if any.
        lines: Its contents, already loaded.
    """
    # Keep a lone ESC responsive.
    try:
        curses.set_escdelay(25)
    except (AttributeError, curses.error):
        os.environ.setdefault("ESCDELAY", "25")

    editor = Tedit(stdscr, config=config, syntaxes=syntaxes)
    if filename is not None:
        editor.open_lines(filename, lines)
    editor._set_status_message(editor.keybinder.help_text())

    try:
        editor.run()
    finally:
        editor.close()


def start() -> None:
    """
    Validates configuration, loads the file, then runs the curses application.
    Startup errors are reported on stderr before the terminal is taken over.
    """
    logger.info("tedit editor starting up...")

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    try:
        syntaxes = build_syntax_db(config)
    except SyntaxConfigError as e:
        logger.critical(f"Invalid syntax configuration: {e}")
        print(f"tedit: invalid syntax configuration: {e}", file=sys.stderr)
        sys.exit(1)

    filename = sys.argv[1] if len(sys.argv) > 1 else None
    lines: list[bytes] = []
    if filename is not None:
        try:
            lines = load_lines(filename)
        except FileLoadError as e:
            print(f"tedit: {e.strerror or e}", file=sys.stderr)
            sys.exit(1)

    try:
        curses.wrapper(main_app_runner, config, syntaxes, filename, lines)
        logger.info("tedit editor shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
