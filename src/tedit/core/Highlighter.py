# tedit/core/Highlighter.py
"""tedit.core.Highlighter
========================

Syntax classification for render buffers.

This module provides the pieces the line store needs to keep every line's
highlight array in sync with its render bytes:

- `Highlight`: the per-cell classification tags.
- `SyntaxRule`: one language description (filename patterns, keyword table,
  comment tokens and number/string flags), built from plain table data and
  validated at construction time.
- `build_syntax_db()`: turns the built-in tables plus any ``[syntax.*]``
  sections from ``config.toml`` into an ordered list of rules.
- `select_syntax()`: picks the active rule for a filename.
- `highlight_line()`: the single left-to-right scan over one render buffer.
  It takes the carried-in block-comment state and returns the tags together
  with the carried-out state, which the line store propagates forward.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping, Optional, Sequence

logger = logging.getLogger("tedit")


class Highlight(IntEnum):
    """Classification of one render cell."""

    NORMAL = 0
    COMMENT = 1
    BLOCK_COMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4
    STRING = 5
    NUMBER = 6
    SEARCH_MATCH = 7


class SyntaxConfigError(ValueError):
    """Raised when a syntax rule table is malformed."""


# Secondary keywords carry a single trailing "|" in table data.
KEYWORD2_MARKER = "|"

_SEPARATORS = frozenset(b",.()+-/*=~%<>[];")
_WHITESPACE = frozenset(b" \t\n\v\f\r")


BUILTIN_SYNTAXES: dict[str, dict[str, Any]] = {
    "c": {
        "filematch": [".c", ".h", ".cpp"],
        "keywords": [
            "switch", "if", "while", "for", "break", "continue", "return",
            "else", "struct", "union", "typedef", "static", "enum", "class",
            "case",
            "int|", "long|", "double|", "float|", "char|", "unsigned|",
            "signed|", "void|",
        ],
        "singleline_comment": "//",
        "multiline_comment": ["/*", "*/"],
        "numbers": True,
        "strings": True,
    },
    "python": {
        "filematch": [".py"],
        "keywords": [
            "and", "as", "assert", "break", "class", "continue", "def", "del",
            "elif", "else", "except", "finally", "for", "from", "global", "if",
            "import", "in", "is", "lambda", "nonlocal", "not", "or", "pass",
            "raise", "return", "try", "while", "with", "yield",
            "None|", "True|", "False|", "self|", "int|", "str|", "bytes|",
            "float|", "list|", "dict|", "set|", "tuple|",
        ],
        "singleline_comment": "#",
        "numbers": True,
        "strings": True,
    },
}


def is_separator(byte: int) -> bool:
    """Return True for whitespace, NUL and the fixed punctuation set."""
    return byte == 0 or byte in _WHITESPACE or byte in _SEPARATORS


def parse_keyword(entry: Any) -> tuple[bytes, Highlight]:
    """Convert one table entry into an explicit ``(text, class)`` pair.

    Raises:
        SyntaxConfigError: for non-strings, empty entries and misplaced or
            repeated priority markers.
    """
    if not isinstance(entry, str):
        raise SyntaxConfigError(f"Keyword entries must be strings, got {entry!r}")

    text, klass = entry, Highlight.KEYWORD1
    if text.endswith(KEYWORD2_MARKER):
        text, klass = text[:-1], Highlight.KEYWORD2
    if not text:
        raise SyntaxConfigError(f"Empty keyword entry {entry!r}")
    if KEYWORD2_MARKER in text:
        raise SyntaxConfigError(f"Misplaced priority marker in keyword {entry!r}")
    return text.encode("utf-8"), klass


@dataclass(frozen=True)
class SyntaxRule:
    """One language description used by `highlight_line`."""

    name: str
    filematch: tuple[str, ...]
    keywords: tuple[tuple[bytes, Highlight], ...] = ()
    singleline_comment: bytes = b""
    block_comment_start: bytes = b""
    block_comment_end: bytes = b""
    numbers: bool = False
    strings: bool = False

    @classmethod
    def from_table(cls, name: str, table: Mapping[str, Any]) -> "SyntaxRule":
        """Builds a rule from table data (built-in dict or a TOML section)."""
        if not isinstance(table, Mapping):
            raise SyntaxConfigError(f"Syntax '{name}' must be a table")

        filematch = table.get("filematch")
        if (
            not isinstance(filematch, (list, tuple))
            or not filematch
            or not all(isinstance(p, str) and p for p in filematch)
        ):
            raise SyntaxConfigError(
                f"Syntax '{name}' needs a non-empty 'filematch' list of strings"
            )

        raw_keywords = table.get("keywords", [])
        if not isinstance(raw_keywords, (list, tuple)):
            raise SyntaxConfigError(f"Syntax '{name}': 'keywords' must be a list")
        try:
            keywords = tuple(parse_keyword(entry) for entry in raw_keywords)
        except SyntaxConfigError as e:
            raise SyntaxConfigError(f"Syntax '{name}': {e}") from e

        scs = table.get("singleline_comment", "")
        if not isinstance(scs, str):
            raise SyntaxConfigError(
                f"Syntax '{name}': 'singleline_comment' must be a string"
            )

        block = table.get("multiline_comment", ["", ""])
        if (
            not isinstance(block, (list, tuple))
            or len(block) != 2
            or not all(isinstance(tok, str) for tok in block)
        ):
            raise SyntaxConfigError(
                f"Syntax '{name}': 'multiline_comment' must be a [start, end] pair"
            )

        return cls(
            name=name,
            filematch=tuple(filematch),
            keywords=keywords,
            singleline_comment=scs.encode("utf-8"),
            block_comment_start=block[0].encode("utf-8"),
            block_comment_end=block[1].encode("utf-8"),
            numbers=bool(table.get("numbers", False)),
            strings=bool(table.get("strings", False)),
        )

    def matches(self, filename: str) -> bool:
        """Extension patterns (leading '.') compare against the file's
        extension; any other pattern matches as a substring."""
        _, ext = os.path.splitext(filename)
        for pattern in self.filematch:
            if pattern.startswith("."):
                if ext and ext == pattern:
                    return True
            elif pattern in filename:
                return True
        return False


def build_syntax_db(config: Optional[Mapping[str, Any]] = None) -> list[SyntaxRule]:
    """Returns the ordered rule list: built-ins first, then user tables.

    A user table with a built-in's name replaces that built-in in place.
    """
    tables: dict[str, Any] = dict(BUILTIN_SYNTAXES)
    user_tables = (config or {}).get("syntax", {}) or {}
    if not isinstance(user_tables, Mapping):
        raise SyntaxConfigError("'syntax' section must be a table of tables")
    for name, table in user_tables.items():
        tables[name] = table

    rules = [SyntaxRule.from_table(name, table) for name, table in tables.items()]
    logger.debug("Built syntax table: %s", [r.name for r in rules])
    return rules


def select_syntax(
    filename: Optional[str], rules: Sequence[SyntaxRule]
) -> Optional[SyntaxRule]:
    """Returns the first rule whose patterns match `filename`, or None."""
    if not filename:
        return None
    for rule in rules:
        if rule.matches(filename):
            return rule
    return None


def highlight_line(
    render: bytes, rule: Optional[SyntaxRule], in_comment: bool = False
) -> tuple[list[Highlight], bool]:
    """Classify every byte of `render`.

    Args:
        render: The line's display bytes.
        rule: Active syntax rule, or None for plain text.
        in_comment: Block-comment state carried in from the previous line.

    Returns:
        ``(tags, open_comment)``: one tag per render byte and whether a block
        comment is still open at the end of the line.
    """
    size = len(render)
    hl = [Highlight.NORMAL] * size
    if rule is None:
        return hl, False

    scs = rule.singleline_comment
    mcs = rule.block_comment_start
    mce = rule.block_comment_end

    prev_sep = True
    in_string = 0
    i = 0
    while i < size:
        c = render[i]
        prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

        if scs and not in_string and not in_comment:
            if render.startswith(scs, i):
                hl[i:] = [Highlight.COMMENT] * (size - i)
                break

        if mcs and mce and not in_string:
            if in_comment:
                hl[i] = Highlight.BLOCK_COMMENT
                if render.startswith(mce, i):
                    end = min(i + len(mce), size)
                    hl[i:end] = [Highlight.BLOCK_COMMENT] * (end - i)
                    i = end
                    in_comment = False
                    prev_sep = True
                else:
                    i += 1
                continue
            if render.startswith(mcs, i):
                end = min(i + len(mcs), size)
                hl[i:end] = [Highlight.BLOCK_COMMENT] * (end - i)
                i = end
                in_comment = True
                continue

        if rule.strings:
            if in_string:
                hl[i] = Highlight.STRING
                if c == ord("\\") and i + 1 < size:
                    hl[i + 1] = Highlight.STRING
                    i += 2
                    continue
                if c == in_string:
                    in_string = 0
                i += 1
                prev_sep = True
                continue
            if c in (ord('"'), ord("'")):
                in_string = c
                hl[i] = Highlight.STRING
                i += 1
                continue

        if rule.numbers:
            is_digit = ord("0") <= c <= ord("9")
            if (is_digit and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                c == ord(".") and prev_hl == Highlight.NUMBER
            ):
                hl[i] = Highlight.NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            matched = False
            for text, klass in rule.keywords:
                klen = len(text)
                following = render[i + klen] if i + klen < size else 0
                if render.startswith(text, i) and is_separator(following):
                    hl[i:i + klen] = [klass] * klen
                    i += klen
                    matched = True
                    break
            if matched:
                prev_sep = False
                continue

        prev_sep = is_separator(c)
        i += 1

    return hl, bool(in_comment)
