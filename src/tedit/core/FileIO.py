# tedit/core/FileIO.py
"""Reading and writing a file as a sequence of byte lines.

Files are handled as raw bytes; no decoding happens here. Saving always
writes a newline after every line, so a file without a trailing newline
gains one on its first save and is stable from then on.
"""

from __future__ import annotations

import logging
from typing import Iterable

logger = logging.getLogger("tedit")


class FileLoadError(OSError):
    """Raised when a file cannot be read at startup."""


def load_lines(path: str) -> list[bytes]:
    """Returns the lines of `path` with LF/CRLF terminators stripped.

    Raises:
        FileLoadError: if the file cannot be opened or read.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.error(f"Failed to load '{path}': {e}")
        raise FileLoadError(e.errno, f"Cannot open '{path}': {e.strerror or e}") from e

    lines = data.split(b"\n")
    # The segment after a final LF is not a line.
    if lines and lines[-1] == b"":
        lines.pop()
    lines = [line.rstrip(b"\r\n") for line in lines]
    logger.info(f"Loaded {len(lines)} lines ({len(data)} bytes) from '{path}'")
    return lines


def save_lines(path: str, lines: Iterable[bytes]) -> int:
    """Writes every line followed by LF, replacing the file. Returns bytes written."""
    payload = b"".join(bytes(line) + b"\n" for line in lines)
    with open(path, "wb") as f:
        f.write(payload)
    logger.info(f"Wrote {len(payload)} bytes to '{path}'")
    return len(payload)
