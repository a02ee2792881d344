# src/tedit/core/__init__.py
"""Public facade for tedit.core: re-export main classes from CamelCase modules.

Keeps the CamelCase file names (LineStore.py, Search.py, ...),
but provides flat imports for convenience and stability. The `Tedit`
controller is imported from `tedit.core.Tedit` directly: it depends on
`tedit.ui`, which itself imports from this package.
"""

# Re-export classes/symbols from CamelCase modules
from .FileIO import FileLoadError, load_lines, save_lines  # noqa: F401
from .Highlighter import Highlight, SyntaxConfigError, SyntaxRule  # noqa: F401
from .Keys import Key, ctrl_key  # noqa: F401
from .LineStore import Line, LineStore  # noqa: F401
from .Search import MatchResult, SearchEngine, SearchState  # noqa: F401
from .Viewport import Viewport, ViewportSnapshot  # noqa: F401


__all__ = [
    "FileLoadError",
    "Highlight",
    "Key",
    "Line",
    "LineStore",
    "MatchResult",
    "SearchEngine",
    "SearchState",
    "SyntaxConfigError",
    "SyntaxRule",
    "Viewport",
    "ViewportSnapshot",
    "ctrl_key",
    "load_lines",
    "save_lines",
]
